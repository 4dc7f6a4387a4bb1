"""Restore the cross-field invariants of a Report.

The model is not trusted to follow its own rubric, so the verdict is
always re-derived from the score and every annotation is checked
against the source text. Each rule is idempotent and the whole pass
never raises.
"""

from __future__ import annotations

import logging

from verifyai.analysis.annotations import generate_default_annotations
from verifyai.analysis.schemas import Annotation, Report
from verifyai.constants import (
    LABEL_COLORS,
    MIN_ANNOTATIONS,
    Verdict,
    clamp_score,
    verdict_for_score,
)

logger = logging.getLogger(__name__)


def enforce_consistency(report: Report, source_text: str) -> Report:
    """Return a copy of ``report`` satisfying every invariant.

    Rules, in order:
    1. clamp score into [0, 100]
    2. overwrite the verdict with the score bucket
    3. drop annotations outside ``0 <= start < end <= len(text)``
    4. force each annotation's color to agree with its label
    5. below MIN_ANNOTATIONS survivors, replace the whole set with
       generated defaults (no merge)
    """
    report = _clamp_score(report)
    report = _correct_verdict(report)

    annotations = _filter_annotations(
        report.heatmap_annotations, len(source_text)
    )
    annotations = _repair_colors(annotations)

    if len(annotations) < MIN_ANNOTATIONS:
        logger.warning(
            "event=annotations_replaced_with_defaults surviving=%d"
            " minimum=%d",
            len(annotations),
            MIN_ANNOTATIONS,
        )
        annotations = generate_default_annotations(
            source_text, report.score
        )

    if annotations != report.heatmap_annotations:
        report = report.model_copy(
            update={"heatmap_annotations": annotations}
        )
    return report


def _clamp_score(report: Report) -> Report:
    clamped = clamp_score(report.score)
    if clamped == report.score:
        return report
    logger.warning(
        "event=score_clamped original=%s clamped=%s",
        report.score,
        clamped,
    )
    return report.model_copy(update={"score": clamped})


def _correct_verdict(report: Report) -> Report:
    expected = verdict_for_score(report.score)
    if report.verdict == expected:
        return report
    logger.warning(
        "event=verdict_corrected score=%s stated=%r expected=%r",
        report.score,
        str(report.verdict),
        str(expected),
    )
    update: dict[str, object] = {"verdict": expected}
    if expected == Verdict.LIKELY_AI:
        update["plain_language_meaning"] = (
            f"This text scores {report.score:g}% AI probability, "
            "indicating overwhelming AI-generated patterns with "
            "minimal human variance."
        )
    return report.model_copy(update=update)


def _filter_annotations(
    annotations: list[Annotation], text_length: int
) -> list[Annotation]:
    kept = [a for a in annotations if a.fits(text_length)]
    dropped = len(annotations) - len(kept)
    if dropped:
        logger.warning(
            "event=annotations_out_of_bounds dropped=%d kept=%d"
            " text_length=%d",
            dropped,
            len(kept),
            text_length,
        )
    return kept


def _repair_colors(annotations: list[Annotation]) -> list[Annotation]:
    repaired: list[Annotation] = []
    for anno in annotations:
        expected = LABEL_COLORS[anno.label]
        if anno.color != expected:
            logger.warning(
                "event=annotation_color_repaired label=%s color=%s",
                anno.label,
                anno.color,
            )
            anno = anno.model_copy(update={"color": expected})
        repaired.append(anno)
    return repaired
