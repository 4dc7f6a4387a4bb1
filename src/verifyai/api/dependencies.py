"""FastAPI dependency injection for repository and service access."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Header, Request

from verifyai.repositories.protocols import (
    AnalysisRepository,
    CreditRepository,
)

if TYPE_CHECKING:
    from verifyai.services.analysis_service import AnalysisService
    from verifyai.services.report_store import ReportStore


@dataclass
class Repos:
    """Repository container resolved per-request via Depends.

    Routes receive this instead of touching session_factory.
    """

    analysis: AnalysisRepository
    credits: CreditRepository


async def get_repos(
    request: Request,
) -> AsyncIterator[Repos]:
    """Generator dep: one session per request (reads only)."""
    from verifyai.repositories.analysis_repo import (
        SqlAnalysisRepository,
    )
    from verifyai.repositories.credit_repo import SqlCreditRepository

    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield Repos(
            analysis=SqlAnalysisRepository(session),
            credits=SqlCreditRepository(session),
        )


def get_analysis_service(request: Request) -> AnalysisService:
    """Get AnalysisService from app.state."""
    return request.app.state.typed.analysis_service  # type: ignore[no-any-return]


def get_report_store(request: Request) -> ReportStore:
    """Get ReportStore from app.state."""
    return request.app.state.typed.store  # type: ignore[no-any-return]


def get_user_id(
    x_user_id: str | None = Header(default=None),
) -> str | None:
    """Authenticated user id from the ``X-User-Id`` header, if any."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()
