"""Persistence collaborator: save reports, adjust credit balances."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol

from verifyai.analysis.schemas import Report
from verifyai.constants import AnalysisContext
from verifyai.models.analysis import AnalysisRecord
from verifyai.repositories.analysis_repo import SqlAnalysisRepository
from verifyai.repositories.credit_repo import SqlCreditRepository
from verifyai.repositories.protocols import (
    AnalysisRepository,
    CreditRepository,
)

logger = logging.getLogger(__name__)


class ReportStore(Protocol):
    async def save_analysis(
        self,
        user_id: str,
        source_text: str,
        report: Report,
        *,
        context: AnalysisContext = AnalysisContext.GENERAL,
        used_fallback: bool = False,
    ) -> str: ...
    async def adjust_credits(self, user_id: str, delta: int) -> int: ...
    async def get_balance(self, user_id: str) -> int | None: ...
    async def clear_history(self, user_id: str) -> int: ...


class SqlReportStore:
    """Each write runs in its own session and transaction.

    A failed insert therefore cannot poison the credit update (or the
    other way round); callers decide what to do with each failure.
    Repo factories default to the SQL repositories; tests can inject
    fakes.
    """

    def __init__(
        self,
        session_factory: Any,
        starting_credits: int,
        analysis_repo_factory: Callable[[Any], AnalysisRepository]
        | None = None,
        credit_repo_factory: Callable[[Any], CreditRepository]
        | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._starting_credits = starting_credits
        self._analysis_repo_factory = (
            analysis_repo_factory or SqlAnalysisRepository
        )
        self._credit_repo_factory = (
            credit_repo_factory or SqlCreditRepository
        )

    async def save_analysis(
        self,
        user_id: str,
        source_text: str,
        report: Report,
        *,
        context: AnalysisContext = AnalysisContext.GENERAL,
        used_fallback: bool = False,
    ) -> str:
        async with self._session_factory() as session:
            repo = self._analysis_repo_factory(session)
            record = await repo.create(
                AnalysisRecord(
                    user_id=user_id,
                    input_text=source_text,
                    context=context,
                    report_json=report.model_dump_json(),
                    score=report.score,
                    verdict=report.verdict,
                    used_fallback=used_fallback,
                )
            )
            await session.commit()
            logger.info(
                "event=analysis_saved analysis_id=%s user_id=%s",
                record.id,
                user_id,
            )
            return record.id

    async def adjust_credits(self, user_id: str, delta: int) -> int:
        async with self._session_factory() as session:
            repo = self._credit_repo_factory(session)
            balance = await repo.adjust(user_id, delta)
            await session.commit()
            logger.info(
                "event=credits_adjusted user_id=%s delta=%d balance=%d",
                user_id,
                delta,
                balance,
            )
            return balance

    async def get_balance(self, user_id: str) -> int | None:
        """Current balance, opening a new account on first sight."""
        async with self._session_factory() as session:
            repo = self._credit_repo_factory(session)
            balance = await repo.open_account(
                user_id, self._starting_credits
            )
            await session.commit()
            return balance

    async def clear_history(self, user_id: str) -> int:
        """Delete every saved analysis of a user; return the count."""
        async with self._session_factory() as session:
            repo = self._analysis_repo_factory(session)
            deleted = await repo.delete_for_user(user_id)
            await session.commit()
            logger.info(
                "event=history_cleared user_id=%s deleted=%d",
                user_id,
                deleted,
            )
            return deleted
