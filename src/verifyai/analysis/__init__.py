"""Report validation and self-healing pipeline."""

from verifyai.analysis.consistency import enforce_consistency
from verifyai.analysis.fallback import build_fallback_report
from verifyai.analysis.generator import (
    LiteLLMReportGenerator,
    ReportGenerator,
)
from verifyai.analysis.parser import ParseFailure, parse_report
from verifyai.analysis.pipeline import (
    ResolvedReport,
    analyze,
    resolve_report,
    run_analysis,
)
from verifyai.analysis.sanitizer import sanitize_response
from verifyai.analysis.schemas import AnalysisRequest, Annotation, Report

__all__ = [
    "AnalysisRequest",
    "Annotation",
    "LiteLLMReportGenerator",
    "ParseFailure",
    "Report",
    "ReportGenerator",
    "ResolvedReport",
    "analyze",
    "build_fallback_report",
    "enforce_consistency",
    "parse_report",
    "resolve_report",
    "run_analysis",
    "sanitize_response",
]
