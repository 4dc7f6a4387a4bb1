"""Split source text into plain and highlighted heatmap segments."""

from __future__ import annotations

from dataclasses import dataclass

from verifyai.analysis.schemas import Annotation


@dataclass(frozen=True)
class HeatmapSegment:
    """A run of source text, highlighted when ``annotation`` is set."""

    text: str
    start: int
    end: int
    annotation: Annotation | None = None

    @property
    def highlighted(self) -> bool:
        return self.annotation is not None


def build_heatmap_segments(
    text: str, annotations: list[Annotation]
) -> list[HeatmapSegment]:
    """Cover ``text`` with contiguous segments in order.

    Annotations are applied by ascending start index. One that
    overlaps an earlier annotation or falls outside the text is
    skipped, so the segments always concatenate back to ``text``.
    """
    segments: list[HeatmapSegment] = []
    last = 0
    for anno in sorted(annotations, key=lambda a: a.start_index):
        if anno.start_index < last or not anno.fits(len(text)):
            continue
        if anno.start_index > last:
            segments.append(
                HeatmapSegment(
                    text=text[last : anno.start_index],
                    start=last,
                    end=anno.start_index,
                )
            )
        segments.append(
            HeatmapSegment(
                text=text[anno.start_index : anno.end_index],
                start=anno.start_index,
                end=anno.end_index,
                annotation=anno,
            )
        )
        last = anno.end_index
    if last < len(text):
        segments.append(
            HeatmapSegment(text=text[last:], start=last, end=len(text))
        )
    return segments
