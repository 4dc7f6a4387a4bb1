"""Synthesize a clearly-labeled degraded Report when parsing fails.

This is the last line of defense, so it never raises: any failure in
the text statistics degrades to fixed defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from verifyai.analysis.annotations import (
    generate_default_annotations,
    split_sentences,
)
from verifyai.analysis.schemas import (
    Evidence,
    FactVerification,
    ForensicDeepDive,
    MetricReading,
    Report,
    Stats,
    StructuralMonotony,
    TuringFriction,
)
from verifyai.constants import (
    FALLBACK_NOTICE,
    FALLBACK_SCORE,
    Confidence,
    clamp_score,
    verdict_for_score,
)

logger = logging.getLogger(__name__)

_RESUBMIT = "Please re-submit the text for a full forensic analysis."


@dataclass(frozen=True)
class TextStats:
    """Crude local statistics used to populate a fallback report."""

    sentence_count: int = 0
    mean_sentence_words: float = 0.0
    word_count: int = 0


def compute_text_stats(text: str) -> TextStats:
    """Sentence count, mean words per sentence and word count."""
    sentences = split_sentences(text)
    words = text.split()
    if not sentences:
        return TextStats(word_count=len(words))
    total = sum(len(s.split()) for s in sentences)
    return TextStats(
        sentence_count=len(sentences),
        mean_sentence_words=round(total / len(sentences), 1),
        word_count=len(words),
    )


def build_fallback_report(
    source_text: str,
    score: float | None = None,
    reason: str | None = None,
) -> Report:
    """Build a fully-populated, internally consistent fallback Report.

    ``score`` is a best-effort guess recovered from the raw response;
    without one the neutral default (75, Medium, Hybrid) is used.
    """
    final_score = clamp_score(score) if score is not None else FALLBACK_SCORE
    try:
        stats = compute_text_stats(source_text)
    except Exception:
        logger.warning("event=fallback_stats_failed", exc_info=True)
        stats = TextStats()

    try:
        annotations = generate_default_annotations(
            source_text, final_score
        )
    except Exception:
        logger.warning(
            "event=fallback_annotations_failed", exc_info=True
        )
        annotations = []

    logger.warning(
        "event=fallback_report_built score=%s sentences=%d reason=%s",
        final_score,
        stats.sentence_count,
        reason or "unparsable_response",
    )

    sentence_summary = (
        f"{stats.sentence_count} sentences averaging "
        f"{stats.mean_sentence_words:g} words"
    )
    return Report(
        score=final_score,
        confidence=Confidence.MEDIUM,
        verdict=verdict_for_score(final_score),
        plain_language_meaning=(
            f"{FALLBACK_NOTICE}: the detailed forensic response could "
            f"not be read, so this is a provisional estimate. {_RESUBMIT}"
        ),
        pattern_insights=(
            f"{FALLBACK_NOTICE} based on local text statistics only "
            f"({sentence_summary}). No model-derived pattern evidence "
            "is available for this submission."
        ),
        key_observations=[
            f"{FALLBACK_NOTICE}: model output could not be parsed",
            f"Local estimate: {sentence_summary}",
            "Score is a neutral placeholder, not a measured result"
            if score is None
            else "Score recovered from a partial model response",
        ],
        stats=Stats(
            sentence_variance=MetricReading(
                result=f"{stats.sentence_count} sentences",
                interpretation=(
                    "Sentence variance was not measured in the "
                    f"{FALLBACK_NOTICE.lower()}."
                ),
            ),
            lexical_density=MetricReading(
                result=f"{stats.word_count} words",
                interpretation=(
                    "Lexical density was not measured in the "
                    f"{FALLBACK_NOTICE.lower()}."
                ),
            ),
            burstiness=MetricReading(
                result=f"{stats.mean_sentence_words:g} words/sentence",
                interpretation=(
                    "Mean sentence length is a crude local estimate, "
                    "not a burstiness measurement."
                ),
            ),
            insight=f"{FALLBACK_NOTICE}. {_RESUBMIT}",
        ),
        evidence=Evidence(
            dominance_explanation=(
                f"{FALLBACK_NOTICE}: no pattern evidence could be "
                "extracted, so neither category dominates."
            ),
        ),
        forensic_deep_dive=ForensicDeepDive(
            structural_monotony=StructuralMonotony(
                label="Not Assessed",
                description=(
                    f"{FALLBACK_NOTICE}: {sentence_summary}."
                ),
            ),
            fact_verification=FactVerification(
                status="Not Assessed",
                insight=f"{FALLBACK_NOTICE}. {_RESUBMIT}",
            ),
            turing_friction=TuringFriction(
                explanation=(
                    f"{FALLBACK_NOTICE}: connective tissue was not "
                    "counted."
                ),
            ),
        ),
        humanization_roadmap=[_RESUBMIT],
        verdict_bullets=[
            f"{FALLBACK_NOTICE}: provisional verdict only",
            f"Local estimate: {sentence_summary}",
        ],
        recommendations=[
            _RESUBMIT,
            "Do not rely on this provisional estimate for decisions.",
        ],
        heatmap_annotations=annotations,
    )
