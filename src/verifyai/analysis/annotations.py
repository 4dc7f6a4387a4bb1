"""Deterministic default heatmap annotations derived from raw text."""

from __future__ import annotations

import re

from verifyai.analysis.schemas import Annotation
from verifyai.constants import (
    ABSOLUTE_FALLBACK_SPAN,
    AI_POLARITY_THRESHOLD,
    LABEL_COLORS,
    MAX_DEFAULT_ANNOTATIONS,
    MIN_SEGMENT_CHARS,
    AnnotationLabel,
)

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

_TOOLTIPS: dict[AnnotationLabel, tuple[str, str]] = {
    AnnotationLabel.AI_PATTERN: (
        "Potential AI Pattern",
        "This segment exhibits characteristics common in "
        "AI-generated text.",
    ),
    AnnotationLabel.HUMAN_PATTERN: (
        "Human-Like Pattern",
        "This segment shows natural human writing patterns.",
    ),
}


def label_for_score(score: float) -> AnnotationLabel:
    """Default polarity: AI at or above the threshold, human below."""
    if score >= AI_POLARITY_THRESHOLD:
        return AnnotationLabel.AI_PATTERN
    return AnnotationLabel.HUMAN_PATTERN


def split_sentences(text: str) -> list[str]:
    """Every non-empty trimmed segment between runs of ``.``, ``!``, ``?``."""
    return [
        seg.strip() for seg in _SENTENCE_SPLIT_RE.split(text) if seg.strip()
    ]


def sentence_segments(text: str) -> list[str]:
    """Sentences long enough to annotate.

    Segments of MIN_SEGMENT_CHARS or fewer (abbreviations, initials,
    "I agree.") are too short to highlight usefully and are dropped.
    """
    return [
        seg for seg in split_sentences(text) if len(seg) > MIN_SEGMENT_CHARS
    ]


def generate_default_annotations(
    text: str, score: float
) -> list[Annotation]:
    """Annotate up to the first few qualifying sentences of ``text``.

    Offsets come from a forward-only cursor, so spans are
    non-overlapping and strictly increasing. With no qualifying
    segment a single span over the first ABSOLUTE_FALLBACK_SPAN
    characters is returned. Only an empty ``text`` yields ``[]``.
    """
    label = label_for_score(score)
    title, explanation = _TOOLTIPS[label]
    color = LABEL_COLORS[label]

    annotations: list[Annotation] = []
    cursor = 0
    for segment in sentence_segments(text)[:MAX_DEFAULT_ANNOTATIONS]:
        start = text.find(segment, cursor)
        if start == -1:
            continue
        end = start + len(segment)
        cursor = end
        annotations.append(
            Annotation(
                start_index=start,
                end_index=end,
                label=label,
                color=color,
                tooltip_title=title,
                tooltip_explanation=explanation,
            )
        )

    if annotations or not text:
        return annotations

    return [
        Annotation(
            start_index=0,
            end_index=min(ABSOLUTE_FALLBACK_SPAN, len(text)),
            label=label,
            color=color,
            tooltip_title=title,
            tooltip_explanation=explanation,
        )
    ]
