"""Built-in sample essay and its static report.

Served without calling the model or consuming credits so users can see
what a full report looks like.
"""

from __future__ import annotations

import re
from functools import lru_cache

from verifyai.analysis.consistency import enforce_consistency
from verifyai.analysis.schemas import (
    Annotation,
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
    AnalysisContext,
    AnnotationColor,
    AnnotationLabel,
    Confidence,
    Verdict,
)

SAMPLE_CONTEXT = AnalysisContext.GENERAL

SAMPLE_TEXT = (
    "Photosynthesis is a sophisticated biological process that serves as "
    "the primary energy-conversion mechanism for life on Earth. Through the "
    "absorption of electromagnetic radiation, specifically within the "
    "visible spectrum, photoautotrophs such as plants and cyanobacteria "
    "synthesize organic compounds from inorganic precursors. The process "
    "occurs within specialized organelles known as chloroplasts, where "
    "chlorophyll pigments capture photons to initiate the light-dependent "
    "reactions. These reactions facilitate the photolysis of water, "
    "releasing molecular oxygen as a byproduct while generating ATP and "
    "NADPH. Subsequently, the Calvin Cycle utilizes these energy carriers "
    "to fix atmospheric carbon dioxide into triose phosphates, which are "
    "eventually converted into glucose and other vital carbohydrates. This "
    "intricate cycle not only sustains the growth and development of the "
    "organism but also maintains the global atmospheric balance by "
    "sequestering carbon and producing the oxygen necessary for aerobic "
    "respiration across the biosphere."
)

_SENTENCE_BOUNDARY_RE = re.compile(r"(?<=\.)\s+")


def _sentence_annotations(text: str) -> list[Annotation]:
    """One AI-pattern annotation per full sentence, punctuation included."""
    annotations: list[Annotation] = []
    cursor = 0
    for sentence in _SENTENCE_BOUNDARY_RE.split(text):
        start = text.index(sentence, cursor)
        cursor = start + len(sentence)
        annotations.append(
            Annotation(
                start_index=start,
                end_index=cursor,
                label=AnnotationLabel.AI_PATTERN,
                color=AnnotationColor.RED,
                tooltip_title="Robotic Syntax",
                tooltip_explanation=(
                    "This sentence exhibits uniform clause structure and "
                    "token probability typical of AI."
                ),
            )
        )
    return annotations


@lru_cache(maxsize=1)
def sample_report() -> Report:
    """The static sample report, validated like any other report."""
    report = Report(
        score=98.5,
        confidence=Confidence.HIGH,
        verdict=Verdict.LIKELY_AI,
        plain_language_meaning=(
            "This text exhibits the typical statistical fingerprint of a "
            "large language model."
        ),
        pattern_insights=(
            "The analysis identified severe structural rigidity and a lack "
            "of rhythmic variance. Every sentence follows an optimal token "
            "path, which is highly characteristic of modern "
            "transformer-based architectures."
        ),
        key_observations=[
            "Highly predictable token transitions",
            "Monotonous rhythmic cadence",
            "Absence of cognitive revision markers",
        ],
        stats=Stats(
            sentence_variance=MetricReading(
                result="Critical Low",
                interpretation=(
                    "Sentences are near-identical in complexity. Natural "
                    "human writing pulses between short and long thoughts."
                ),
            ),
            lexical_density=MetricReading(
                result="Extreme",
                interpretation=(
                    "Unnaturally high frequency of Tier-3 academic "
                    "vocabulary without filler or transition noise."
                ),
            ),
            burstiness=MetricReading(
                result="Flattened",
                interpretation=(
                    "The text flow is perfectly uniform. Humans write in "
                    "bursts followed by pauses."
                ),
            ),
            insight=(
                "The structural integrity is too perfect, matching the "
                "statistical peaks of large-model training data."
            ),
        ),
        evidence=Evidence(
            ai_patterns=[
                "Uniform sentence structure",
                "Perfect grammatical consistency",
                "Zero idiosyncratic errors",
            ],
            human_signals=[],
            dominance_explanation=(
                "Statistical patterns across the entire sample align with "
                "the optimal-path logic of transformer-based models."
            ),
        ),
        forensic_deep_dive=ForensicDeepDive(
            structural_monotony=StructuralMonotony(
                label="Rhythmic Uniformity Detected",
                description=(
                    "The rhythm of the sentences is near-identical, with "
                    "no staccato human variation."
                ),
            ),
            fact_verification=FactVerification(
                status="Generic Implementation",
                insight=(
                    "References to the Calvin Cycle and photolysis are "
                    "technically perfect but encyclopedic, lacking "
                    "specific human insight or localized context."
                ),
            ),
            turing_friction=TuringFriction(
                connective_tissue_count=2,
                detected_tokens=["specifically", "Subsequently"],
                explanation=(
                    "Connective tissue appears at calculated intervals "
                    "typical of LLM logic chains."
                ),
            ),
        ),
        humanization_roadmap=[
            "Inject human noise: mix very short sentences with complex "
            "ones to introduce rhythmic variety.",
            "Replace formal transitions like 'Subsequently' with varied, "
            "casual ones such as 'Then' or 'Next'.",
            "Add personal analogies or specific local citations that a "
            "general model would not rank as the optimal next token.",
        ],
        verdict_bullets=[
            "99.2% Statistical Alignment",
            "Lack of Syntactic Variety",
            "Mechanical Transition Density",
        ],
        recommendations=[
            "Verify whether an AI drafting tool was used for the initial "
            "technical summary.",
            "Look for personal anecdotes or non-standard analogies; if "
            "absent, authorship remains questionable.",
        ],
        heatmap_annotations=_sentence_annotations(SAMPLE_TEXT),
    )
    return enforce_consistency(report, SAMPLE_TEXT)
