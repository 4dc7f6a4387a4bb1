"""LLM prompts for the forensic authorship audit.

The system prompt carries the detection framework, scoring rubric and
verdict mapping. The user prompt embeds the text under analysis, the
selected context and the exact JSON shape the response must follow.
Field names in REPORT_JSON_TEMPLATE are the wire contract parsed by
``verifyai.analysis.parser``; keep them in sync with
``verifyai.analysis.schemas``.
"""

from __future__ import annotations

from dataclasses import dataclass
from string import Template

from verifyai.constants import AnalysisContext, Verdict

# ── Context guidance (deterministic dict lookup) ─────────────────

CONTEXT_GUIDANCE: dict[AnalysisContext, str] = {
    AnalysisContext.HR: (
        "Focus on behavioral authenticity, personal narrative "
        "consistency, and genuine career reflection vs. resume "
        "optimization patterns."
    ),
    AnalysisContext.EDUCATION: (
        "Analyze academic integrity markers: original argumentation, "
        "proper citation style, depth of analysis vs. surface-level "
        "synthesis."
    ),
    AnalysisContext.MARKETING: (
        "Examine brand voice authenticity, creative variance, "
        "emotional resonance vs. template-driven copy patterns."
    ),
    AnalysisContext.GENERAL: (
        "Apply comprehensive forensic analysis across all dimensions "
        "without specialized focus."
    ),
}

# ── System prompt ─────────────────────────────────────────────────

SYSTEM_PROMPT = f"""\
You are an elite AI-text forensics expert at Verify AI. You perform \
clinical, mathematically rigorous authorship analysis.

# CORE DETECTION FRAMEWORK

## AI-Generated Text Signatures:
1. **Structural Monotony**: Sentences within 15-25 words with <20% variance
2. **Lexical Over-Optimization**: Excessive Tier-3 vocabulary \
(sophistication, facilitate, subsequently)
3. **Connective Tissue Overuse**: High frequency of "Furthermore", \
"Moreover", "Additionally", "Subsequently", "In conclusion", \
"Consequently", "Therefore", "Thus", "Hence", "Specifically", "Notably"
4. **Perfect Grammar**: Zero typos, no contractions, no colloquialisms
5. **Generic Factual Treatment**: Citations used encyclopedically \
without personal insight
6. **Balanced Structure**: Every paragraph ~same length, no tangents
7. **Predictable Flow**: Topic sentence → elaboration → conclusion

## Human-Written Text Signatures:
1. **High Burstiness**: Mix of 3-5 word sentences and 30+ word sentences
2. **Lexical Variance**: Casual language mixed with formal, \
contractions, idioms
3. **Natural Transitions**: Varied or minimal connective tissue
4. **Organic Errors**: Typos, awkward phrasing, informal speech
5. **Specific Insight**: Personal anecdotes, unique perspectives, \
localized context
6. **Asymmetric Structure**: Varying paragraph lengths, digressions
7. **Unpredictable Flow**: Stream-of-consciousness, non-linear thinking

## SCORING RUBRIC (AI Probability):
- **95-100%**: Near-perfect AI signature
- **85-94%**: Strong AI patterns
- **70-84%**: Moderate AI patterns
- **50-69%**: Hybrid/Uncertain, possibly AI-assisted human writing
- **30-49%**: Weak AI patterns
- **0-29%**: Clear human authorship

## VERDICT MAPPING (STRICT):
- Score 90-100 → "{Verdict.LIKELY_AI}"
- Score 70-89 → "{Verdict.HYBRID}"
- Score 50-69 → "{Verdict.INCONCLUSIVE}"
- Score 0-49 → "{Verdict.LIKELY_HUMAN}"

You MUST return valid JSON with no markdown formatting."""

# ── Analysis protocol (phases 1-5) ───────────────────────────────

ANALYSIS_PROTOCOL = """\
# FORENSIC ANALYSIS PROTOCOL

## PHASE 1: QUANTITATIVE METRICS
1. Sentence analysis: count sentences, compute each length in words, \
the mean, the standard deviation (σ), and Burstiness = σ / mean.
2. Lexical analysis: total words, unique words, Lexical Diversity = \
unique/total, Tier-3 academic words, contractions, informal markers.
3. Connective tissue audit: count formal transitions and their density \
per 100 words.
4. Error detection: grammar errors, typos, awkward phrasing.

## PHASE 2: PATTERN RECOGNITION
1. Structural monotony: σ < 5 words AND mean 15-25 words → \
"Rhythmic Uniformity Detected"; σ > 10 words → "High Human Burstiness".
2. Fact verification: are citations, names and references used \
generically (AI) or with specific insight (human)?
3. Turing friction: > 3 connectives per 100 words → \
"Over-Optimized Transitions"; connectives at regular intervals → \
"Statistical Placement Pattern".

## PHASE 3: SCORING DECISION
Start at 50 (neutral).
Add: low burstiness (σ/mean < 0.5) +20; high connective tissue \
(> 3 per 100 words) +15; zero errors/contractions +10; uniform sentence \
length (σ < 5) +20; generic fact usage +10; balanced paragraphs +10.
Subtract: high burstiness (σ/mean > 0.8) -20; low connective tissue \
(< 2 per 100 words) -15; contractions/informal language -10; varied \
sentence length (σ > 10) -20; specific/personal facts -10; asymmetric \
structure -10.
Final score must be 0-100.

## PHASE 4: HEATMAP GENERATION
Select 5-10 representative segments. Provide EXACT character indices \
(start_index, end_index) into the original text and explain each.

## PHASE 5: HUMANIZATION ROADMAP
Provide 3 actionable tips: sentence variance, vocabulary/transitions, \
content depth/authenticity."""

# ── Required JSON shape ──────────────────────────────────────────

REPORT_JSON_TEMPLATE = Template("""\
{
  "score": <number 0-100>,
  "confidence": "<High | Medium | Low>",
  "verdict": "<MUST match score: 90-100='$likely_ai' | 70-89='$hybrid' | 50-69='$inconclusive' | 0-49='$likely_human'>",
  "plain_language_meaning": "<1 sentence>",
  "pattern_insights": "<2-3 sentences on the dominant findings>",
  "key_observations": ["<finding 1>", "<finding 2>", "<finding 3>"],
  "stats": {
    "sentence_variance": {"result": "<σ/mean ratio + class>", "interpretation": "<meaning>"},
    "lexical_density": {"result": "<unique/total ratio + class>", "interpretation": "<meaning>"},
    "burstiness": {"result": "<score + class>", "interpretation": "<meaning>"},
    "insight": "<1-2 sentences tying the statistics together>"
  },
  "evidence": {
    "ai_patterns": ["<specific AI pattern with data>"],
    "human_signals": ["<specific human signal with data>"],
    "dominance_explanation": "<which category dominates and why>"
  },
  "forensic_deep_dive": {
    "structural_monotony": {"label": "<label>", "description": "<details>"},
    "fact_verification": {"status": "<status>", "insight": "<details>"},
    "turing_friction": {
      "connective_tissue_count": <integer>,
      "detected_tokens": ["<connective word>"],
      "explanation": "<density and placement>"
    }
  },
  "humanization_roadmap": ["<tip 1>", "<tip 2>", "<tip 3>"],
  "verdict_bullets": ["<bullet 1>", "<bullet 2>", "<bullet 3>"],
  "recommendations": ["<$context recommendation 1>", "<recommendation 2>"],
  "heatmap_annotations": [
    {
      "start_index": <character offset where the segment starts>,
      "end_index": <character offset where the segment ends>,
      "label": "<AI_PATTERN or HUMAN_PATTERN>",
      "color": "<red if AI_PATTERN, blue if HUMAN_PATTERN>",
      "tooltip_title": "<short label>",
      "tooltip_explanation": "<why this segment is flagged>"
    }
  ]
}""")

VALIDATION_RULES = """\
# CRITICAL VALIDATION RULES:
1. Score MUST align with verdict (90-100=AI-Generated, 70-89=Hybrid, \
50-69=Inconclusive, 0-49=Human)
2. All metrics must be based on actual calculations from the text
3. Heatmap start_index and end_index must reference real character positions
4. Evidence must cite specific examples from the text
5. Humanization tips must include concrete before/after examples

Return ONLY the JSON object. No explanatory text before or after."""


@dataclass(frozen=True)
class AnalysisPrompts:
    """System + user prompt pair for one analysis request."""

    system: str
    user: str

    def as_messages(self) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


@dataclass(frozen=True)
class ModelParameters:
    """Sampling settings sent with every forensic audit.

    Low temperature keeps repeated audits of the same text close to
    each other.
    """

    temperature: float = 0.3
    top_p: float = 0.9
    max_tokens: int = 8192
    json_mode: bool = False

    def completion_kwargs(self) -> dict[str, object]:
        kwargs: dict[str, object] = {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "max_tokens": self.max_tokens,
        }
        if self.json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        return kwargs


def render_report_schema(context: AnalysisContext) -> str:
    """Fill the JSON template with verdict labels and the context."""
    return REPORT_JSON_TEMPLATE.substitute(
        likely_ai=Verdict.LIKELY_AI,
        hybrid=Verdict.HYBRID,
        inconclusive=Verdict.INCONCLUSIVE,
        likely_human=Verdict.LIKELY_HUMAN,
        context=context.value,
    )


def build_analysis_prompt(
    text: str, context: AnalysisContext
) -> str:
    """Assemble the user prompt for one forensic audit."""
    guidance = CONTEXT_GUIDANCE[context]
    return (
        "Perform a comprehensive forensic authorship audit on this "
        f"{context.value} context text.\n\n"
        f'# TEXT TO ANALYZE:\n"""\n{text}\n"""\n\n'
        f"{ANALYSIS_PROTOCOL}\n\n"
        "## CONTEXT-SPECIFIC RECOMMENDATIONS\n\n"
        f"For {context.value} context: {guidance}\n\n"
        "---\n\n"
        "# REQUIRED JSON OUTPUT\n\n"
        "Return this EXACT structure (no markdown, no backticks):\n\n"
        f"{render_report_schema(context)}\n\n"
        f"{VALIDATION_RULES}"
    )


def build_prompts(
    text: str, context: AnalysisContext
) -> AnalysisPrompts:
    """Build the (system, user) prompt pair.

    Pure templating. Minimum-length checks belong to the caller.
    """
    return AnalysisPrompts(
        system=SYSTEM_PROMPT,
        user=build_analysis_prompt(text, context),
    )
