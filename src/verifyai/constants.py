"""Shared constants: single source of truth for cross-module values.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so the wire format (JSON, SQL,
API payloads) uses the enum values directly.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class Confidence(StrEnum):
    """Qualitative confidence the model attaches to its verdict."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class Verdict(StrEnum):
    """Authorship verdict labels, one per score bucket."""

    LIKELY_HUMAN = "Likely Human-Written"
    LIKELY_AI = "Likely AI-Generated"
    HYBRID = "AI-Assisted (Hybrid)"
    INCONCLUSIVE = "Inconclusive (Insufficient Evidence)"


class AnnotationLabel(StrEnum):
    """Heatmap annotation polarity."""

    AI_PATTERN = "AI_PATTERN"
    HUMAN_PATTERN = "HUMAN_PATTERN"


class AnnotationColor(StrEnum):
    """Display color of a heatmap annotation (derived from its label)."""

    RED = "red"
    BLUE = "blue"


class AnalysisContext(StrEnum):
    """User-selected domain hint; only changes prompt phrasing."""

    HR = "HR"
    EDUCATION = "EDUCATION"
    MARKETING = "MARKETING"
    GENERAL = "GENERAL"


class ExportFormat(StrEnum):
    """Supported report export formats."""

    JSON = "json"
    MARKDOWN = "markdown"


LABEL_COLORS: dict[AnnotationLabel, AnnotationColor] = {
    AnnotationLabel.AI_PATTERN: AnnotationColor.RED,
    AnnotationLabel.HUMAN_PATTERN: AnnotationColor.BLUE,
}

# ── Score → Verdict Buckets ──────────────────────────────

SCORE_MIN = 0.0
SCORE_MAX = 100.0

# Lower bounds, checked highest first. Anything below the last
# bound is LIKELY_HUMAN.
VERDICT_BUCKETS: tuple[tuple[float, Verdict], ...] = (
    (90.0, Verdict.LIKELY_AI),
    (70.0, Verdict.HYBRID),
    (50.0, Verdict.INCONCLUSIVE),
)

# Default annotation polarity flips to AI at this score
AI_POLARITY_THRESHOLD = 70.0


def clamp_score(score: float) -> float:
    """Force a score into [SCORE_MIN, SCORE_MAX]."""
    return min(SCORE_MAX, max(SCORE_MIN, score))


def verdict_for_score(score: float) -> Verdict:
    """Map a score to its verdict bucket.

    The mapping is total over [0, 100]; out-of-range scores are
    clamped first.
    """
    clamped = clamp_score(score)
    for lower, verdict in VERDICT_BUCKETS:
        if clamped >= lower:
            return verdict
    return Verdict.LIKELY_HUMAN


# ── Requests & Credits ───────────────────────────────────

ANALYSIS_CREDIT_COST = 2
MIN_TEXT_LENGTH = 50
DEFAULT_STARTING_CREDITS = 30
HISTORY_LIMIT = 12

# ── Annotations ──────────────────────────────────────────

MIN_ANNOTATIONS = 3
MAX_DEFAULT_ANNOTATIONS = 5
MIN_SEGMENT_CHARS = 10  # segments must be strictly longer than this
ABSOLUTE_FALLBACK_SPAN = 100

# ── Fallback Report ──────────────────────────────────────

FALLBACK_SCORE = 75.0
FALLBACK_NOTICE = "Fallback analysis"

# ── Circuit Breaker Configuration ────────────────────────

CB_LLM_FAILURE_THRESHOLD = 5
CB_LLM_RECOVERY_TIMEOUT = 30

# ── Retry Strategy ───────────────────────────────────────

RETRY_MAX_ATTEMPTS = 3
RETRY_INITIAL_WAIT = 2
RETRY_MAX_WAIT = 30

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200
RAW_PREVIEW_CHARS = 120

# ── Auth Exempt Paths ────────────────────────────────────

API_KEY_HEADER = "X-API-Key"

# Open without an API key: liveness, docs and the static sample report
# (no model call, no credits).
AUTH_EXEMPT_PATHS = frozenset({
    "/api/health",
    "/api/sample",
    "/api/openapi.json",
})

AUTH_EXEMPT_PREFIXES = ("/api/docs", "/api/redoc")

# ── ID Generation ───────────────────────────────────────

ID_HEX_LENGTH = 12
