"""Export module: report rendering in multiple formats."""

from collections.abc import Callable

from verifyai.analysis.schemas import Report
from verifyai.constants import ExportFormat
from verifyai.export.heatmap import HeatmapSegment, build_heatmap_segments
from verifyai.export.json_export import export_report_json
from verifyai.export.markdown import export_report_markdown

__all__ = [
    "HeatmapSegment",
    "build_heatmap_segments",
    "export_report",
    "export_report_json",
    "export_report_markdown",
]

_REPORT_EXPORTERS: dict[str, Callable[[Report, str], str]] = {
    ExportFormat.JSON: export_report_json,
    ExportFormat.MARKDOWN: export_report_markdown,
}


def export_report(
    report: Report,
    source_text: str,
    fmt: str = "json",
) -> str:
    """Dispatch report export by format string."""
    exporter = _REPORT_EXPORTERS.get(fmt)
    if exporter is None:
        valid = ", ".join(_REPORT_EXPORTERS)
        msg = f"Unsupported format: {fmt}. Use: {valid}"
        raise ValueError(msg)
    return exporter(report, source_text)
