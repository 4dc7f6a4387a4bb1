"""Report validation and self-healing pipeline.

prompts → model call → sanitize → parse → (fallback on ParseFailure)
→ consistency pass. The model call is the only suspension point;
every stage after it is synchronous and cannot fail.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from verifyai.analysis.consistency import enforce_consistency
from verifyai.analysis.fallback import build_fallback_report
from verifyai.analysis.generator import ReportGenerator
from verifyai.analysis.parser import ParseFailure, parse_report
from verifyai.analysis.sanitizer import sanitize_response
from verifyai.analysis.schemas import AnalysisRequest, Report
from verifyai.prompts import build_prompts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedReport:
    """A validated report plus how it was obtained."""

    report: Report
    used_fallback: bool = False
    parse_error: str | None = None


def resolve_report(raw_text: str, source_text: str) -> ResolvedReport:
    """Turn raw model output into a Report that satisfies every invariant.

    Never raises: unparsable output becomes a fallback report, and
    both paths go through the consistency pass.
    """
    sanitized = sanitize_response(raw_text)
    try:
        parsed = parse_report(sanitized, raw_text)
    except ParseFailure as failure:
        fallback = build_fallback_report(
            source_text,
            score=failure.score_hint,
            reason=failure.error,
        )
        return ResolvedReport(
            report=enforce_consistency(fallback, source_text),
            used_fallback=True,
            parse_error=failure.error,
        )
    return ResolvedReport(report=enforce_consistency(parsed, source_text))


async def analyze(
    request: AnalysisRequest, generator: ReportGenerator
) -> ResolvedReport:
    """Run one analysis end to end.

    ModelCallError from the generator propagates: a transport failure
    produces no report at all.
    """
    prompts = build_prompts(request.text, request.context)
    raw = await generator.generate(prompts)
    resolved = resolve_report(raw, request.text)
    if resolved.used_fallback:
        logger.warning(
            "event=analysis_used_fallback context=%s text_len=%d",
            request.context,
            len(request.text),
        )
    return resolved


async def run_analysis(
    request: AnalysisRequest, generator: ReportGenerator
) -> Report:
    """Pure pipeline entry point: request in, validated Report out."""
    resolved = await analyze(request, generator)
    return resolved.report
