"""Built-in sample report: no model call, no credits."""

from __future__ import annotations

from fastapi import APIRouter

from verifyai.analysis.sample import (
    SAMPLE_CONTEXT,
    SAMPLE_TEXT,
    sample_report,
)
from verifyai.api.schemas import APIResponse
from verifyai.export import build_heatmap_segments

router = APIRouter(prefix="/api", tags=["sample"])


@router.get("/sample")
async def get_sample() -> APIResponse:
    """Return the sample text, its report and heatmap segments."""
    report = sample_report()
    segments = build_heatmap_segments(
        SAMPLE_TEXT, report.heatmap_annotations
    )
    return APIResponse(
        success=True,
        data={
            "input_text": SAMPLE_TEXT,
            "context": SAMPLE_CONTEXT.value,
            "report": report.model_dump(mode="json"),
            "segments": [
                {
                    "text": s.text,
                    "start": s.start,
                    "end": s.end,
                    "label": s.annotation.label if s.annotation else None,
                }
                for s in segments
            ],
        },
    )
