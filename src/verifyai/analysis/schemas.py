"""Pydantic models for the forensic authorship report.

Field names match the JSON the model is asked to return (see
``verifyai.prompts.REPORT_JSON_TEMPLATE``). Reports are frozen;
repairs build new instances with ``model_copy(update=...)``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from verifyai.constants import (
    AnalysisContext,
    AnnotationColor,
    AnnotationLabel,
    Confidence,
    Verdict,
)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Annotation(_Frozen):
    """A labeled character span in the source text."""

    start_index: int
    end_index: int
    label: AnnotationLabel
    color: AnnotationColor
    tooltip_title: str = ""
    tooltip_explanation: str = ""

    def fits(self, text_length: int) -> bool:
        """True if ``0 <= start < end <= text_length``."""
        return (
            0 <= self.start_index < self.end_index <= text_length
        )


class MetricReading(_Frozen):
    """A (result-label, interpretation) pair for one statistic."""

    result: str = ""
    interpretation: str = ""


class Stats(_Frozen):
    sentence_variance: MetricReading = Field(
        default_factory=MetricReading
    )
    lexical_density: MetricReading = Field(
        default_factory=MetricReading
    )
    burstiness: MetricReading = Field(default_factory=MetricReading)
    insight: str = ""


class Evidence(_Frozen):
    ai_patterns: list[str] = Field(default_factory=lambda: list[str]())
    human_signals: list[str] = Field(
        default_factory=lambda: list[str]()
    )
    dominance_explanation: str = ""


class StructuralMonotony(_Frozen):
    label: str = ""
    description: str = ""


class FactVerification(_Frozen):
    status: str = ""
    insight: str = ""


class TuringFriction(_Frozen):
    connective_tissue_count: int = 0
    detected_tokens: list[str] = Field(
        default_factory=lambda: list[str]()
    )
    explanation: str = ""


class ForensicDeepDive(_Frozen):
    structural_monotony: StructuralMonotony = Field(
        default_factory=StructuralMonotony
    )
    fact_verification: FactVerification = Field(
        default_factory=FactVerification
    )
    turing_friction: TuringFriction = Field(
        default_factory=TuringFriction
    )


class Report(_Frozen):
    """One analysis result.

    Structural validity only. Cross-field invariants (score range,
    verdict bucket, annotation bounds and count) are restored by
    ``verifyai.analysis.consistency.enforce_consistency``.
    """

    score: float = Field(allow_inf_nan=False)
    confidence: Confidence
    verdict: Verdict
    plain_language_meaning: str
    pattern_insights: str
    key_observations: list[str] = Field(
        default_factory=lambda: list[str]()
    )
    stats: Stats
    evidence: Evidence
    forensic_deep_dive: ForensicDeepDive
    humanization_roadmap: list[str] = Field(
        default_factory=lambda: list[str]()
    )
    verdict_bullets: list[str] = Field(
        default_factory=lambda: list[str]()
    )
    recommendations: list[str] = Field(
        default_factory=lambda: list[str]()
    )
    heatmap_annotations: list[Annotation] = Field(
        default_factory=lambda: list[Annotation]()
    )


class AnalysisRequest(_Frozen):
    """Ephemeral submission: text plus context. Never persisted."""

    text: str
    context: AnalysisContext = AnalysisContext.GENERAL
