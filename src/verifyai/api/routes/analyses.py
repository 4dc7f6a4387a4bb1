"""Analysis submission and history routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from verifyai.api.dependencies import (
    Repos,
    get_analysis_service,
    get_report_store,
    get_repos,
    get_user_id,
)
from verifyai.api.schemas import APIResponse, AnalyzeRequest
from verifyai.constants import HISTORY_LIMIT, AnalysisContext
from verifyai.resilience.errors import (
    AnalysisError,
    AnalysisInProgressError,
    InputRejectedError,
    InsufficientCreditsError,
    ModelCallError,
)
from verifyai.services.analysis_service import (
    AnalysisService,
    CreditLookupError,
    Requester,
)
from verifyai.services.report_store import ReportStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analyses", tags=["analyses"])

_STATUS_BY_ERROR: tuple[tuple[type[AnalysisError], int], ...] = (
    (InputRejectedError, 400),
    (InsufficientCreditsError, 402),
    (AnalysisInProgressError, 409),
    (ModelCallError, 502),
    (CreditLookupError, 503),
)

_USER_REQUIRED = "X-User-Id header required"


def _error_response(
    status_code: int, error: str, **metadata: object
) -> JSONResponse:
    body = APIResponse(success=False, error=error, metadata=metadata)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _status_for(exc: AnalysisError) -> int:
    for error_cls, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_cls):
            return status_code
    return 500


@router.post("", response_model=None)
async def submit_analysis(
    body: AnalyzeRequest,
    service: AnalysisService = Depends(get_analysis_service),
    user_id: str | None = Depends(get_user_id),
) -> APIResponse | JSONResponse:
    """Analyze a text and return the validated report."""
    requester = Requester(
        user_id=user_id,
        guest_credits=body.guest_credits,
        session_id=body.session_id,
    )
    try:
        context = _parse_context(body.context)
        outcome = await service.submit(body.text, context, requester)
    except AnalysisError as exc:
        metadata: dict[str, object] = {}
        if isinstance(exc, ModelCallError):
            metadata["error_class"] = exc.error_class.value
        if isinstance(exc, InsufficientCreditsError):
            metadata["credits_remaining"] = exc.balance
            metadata["cost"] = exc.cost
        return _error_response(
            _status_for(exc), exc.user_message, **metadata
        )

    return APIResponse(
        success=True,
        data={
            "analysis_id": outcome.analysis_id,
            "report": outcome.report.model_dump(mode="json"),
        },
        metadata={
            "context": context.value,
            "credits_remaining": outcome.credits_remaining,
            "used_fallback": outcome.used_fallback,
            "persistence_errors": outcome.persistence_errors,
            "authenticated": requester.is_authenticated,
        },
    )


def _parse_context(value: str) -> AnalysisContext:
    try:
        return AnalysisContext(value.upper())
    except ValueError:
        valid = ", ".join(c.value for c in AnalysisContext)
        raise InputRejectedError(
            f"Unknown context: {value}. Use: {valid}"
        ) from None


@router.get("", response_model=None)
async def list_history(
    repos: Repos = Depends(get_repos),
    user_id: str | None = Depends(get_user_id),
) -> APIResponse | JSONResponse:
    """List the most recent analyses of the current user."""
    if user_id is None:
        return _error_response(401, _USER_REQUIRED)
    records = await repos.analysis.list_recent(user_id, HISTORY_LIMIT)
    return APIResponse(
        success=True,
        data=[r.to_dict(include_report=False) for r in records],
        metadata={"limit": HISTORY_LIMIT},
    )


@router.get("/{analysis_id}", response_model=None)
async def get_analysis(
    analysis_id: str,
    repos: Repos = Depends(get_repos),
    user_id: str | None = Depends(get_user_id),
) -> APIResponse | JSONResponse:
    """Get one saved analysis with its full report."""
    if user_id is None:
        return _error_response(401, _USER_REQUIRED)
    record = await repos.analysis.get_by_id(analysis_id)
    if record is None or record.user_id != user_id:
        return _error_response(404, "Analysis not found")
    return APIResponse(success=True, data=record.to_dict())


@router.delete("", response_model=None)
async def clear_history(
    store: ReportStore = Depends(get_report_store),
    user_id: str | None = Depends(get_user_id),
) -> APIResponse | JSONResponse:
    """Delete every saved analysis of the current user."""
    if user_id is None:
        return _error_response(401, _USER_REQUIRED)
    deleted = await store.clear_history(user_id)
    return APIResponse(success=True, data={"deleted": deleted})
