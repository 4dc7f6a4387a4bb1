"""Credit balance route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from verifyai.api.dependencies import get_report_store, get_user_id
from verifyai.api.schemas import APIResponse
from verifyai.constants import ANALYSIS_CREDIT_COST
from verifyai.services.report_store import ReportStore

router = APIRouter(prefix="/api", tags=["credits"])


@router.get("/credits")
async def get_credits(
    request: Request,
    store: ReportStore = Depends(get_report_store),
    user_id: str | None = Depends(get_user_id),
) -> APIResponse:
    """Current balance; guests get the starting guest allowance."""
    if user_id is None:
        balance = request.app.state.settings.guest_credits
    else:
        balance = await store.get_balance(user_id) or 0
    return APIResponse(
        success=True,
        data={"credits": balance},
        metadata={
            "cost_per_analysis": ANALYSIS_CREDIT_COST,
            "authenticated": user_id is not None,
        },
    )
