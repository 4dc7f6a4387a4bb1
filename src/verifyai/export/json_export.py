"""JSON export: structured envelope."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from verifyai.analysis.schemas import Report


def export_report_json(
    report: Report,
    source_text: str,
    analysis_id: str | None = None,
) -> str:
    """Export a report with its source text as structured JSON."""
    payload: dict[str, Any] = {
        "analysis_id": analysis_id,
        "generated_at": datetime.now(UTC).isoformat(),
        "input_text": source_text,
        "report": report.model_dump(mode="json"),
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)
