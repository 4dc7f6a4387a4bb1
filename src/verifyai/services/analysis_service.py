"""Submission orchestration: input checks, pipeline, persistence, credits."""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field

from verifyai.analysis.generator import ReportGenerator
from verifyai.analysis.pipeline import analyze
from verifyai.analysis.schemas import AnalysisRequest, Report
from verifyai.constants import (
    ANALYSIS_CREDIT_COST,
    DEFAULT_STARTING_CREDITS,
    ERROR_TRUNCATION_CHARS,
    ID_HEX_LENGTH,
    MIN_TEXT_LENGTH,
    AnalysisContext,
)
from verifyai.logger import AnalysisLogger
from verifyai.resilience.errors import (
    AnalysisError,
    InputRejectedError,
    InsufficientCreditsError,
    ModelCallError,
)
from verifyai.resilience.in_flight import InFlightGuard
from verifyai.services.report_store import ReportStore

logger = logging.getLogger(__name__)


class CreditLookupError(AnalysisError):
    """The balance of an authenticated user could not be read."""

    user_message = (
        "Could not verify your credit balance. Please try again."
    )


@dataclass(frozen=True)
class Requester:
    """Who is submitting: an authenticated user or a guest.

    Guests hold their balance client-side and pass it in; it is
    returned decremented and never persisted.
    """

    user_id: str | None = None
    guest_credits: int | None = None
    session_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def session_key(self) -> str | None:
        if self.user_id is not None:
            return f"user:{self.user_id}"
        if self.session_id is not None:
            return f"guest:{self.session_id}"
        return None


@dataclass
class AnalysisOutcome:
    """A validated report plus what happened around it."""

    report: Report
    used_fallback: bool
    credits_remaining: int
    analysis_id: str | None = None
    persistence_errors: list[str] = field(
        default_factory=lambda: list[str]()
    )


def validate_text(text: str) -> None:
    """Reject empty or too-short submissions before any model call."""
    if not text.strip() or len(text) < MIN_TEXT_LENGTH:
        raise InputRejectedError(
            f"Minimum {MIN_TEXT_LENGTH} characters required."
        )


class AnalysisService:
    """Runs one analysis per call and applies its side effects.

    Writes happen only after the report is fully validated, in the
    order "save report" then "decrement credits". A failed write is
    reported in the outcome and never hides the report.
    """

    def __init__(
        self,
        generator: ReportGenerator,
        store: ReportStore,
        *,
        audit_logger: AnalysisLogger | None = None,
        guard: InFlightGuard | None = None,
        guest_credits: int = DEFAULT_STARTING_CREDITS,
    ) -> None:
        self._generator = generator
        self._store = store
        self._audit = audit_logger
        self._guard = guard or InFlightGuard()
        self._guest_credits = guest_credits

    async def submit(
        self,
        text: str,
        context: AnalysisContext,
        requester: Requester,
    ) -> AnalysisOutcome:
        """Validate input, check credits, analyze, persist.

        Raises InputRejectedError, InsufficientCreditsError,
        CreditLookupError, AnalysisInProgressError or ModelCallError.
        Nothing is charged when any of them is raised.
        """
        validate_text(text)
        balance = await self._current_balance(requester)
        if balance < ANALYSIS_CREDIT_COST:
            raise InsufficientCreditsError(balance, ANALYSIS_CREDIT_COST)

        request = AnalysisRequest(text=text, context=context)
        key = requester.session_key
        if key is None:
            return await self._run(request, requester, balance)
        return await self._guard.execute(
            key, lambda: self._run(request, requester, balance)
        )

    async def _current_balance(self, requester: Requester) -> int:
        if requester.user_id is None:
            if requester.guest_credits is None:
                return self._guest_credits
            return requester.guest_credits
        try:
            balance = await self._store.get_balance(requester.user_id)
        except Exception as exc:
            logger.error(
                "event=credit_lookup_failed user_id=%s",
                requester.user_id,
                exc_info=True,
            )
            raise CreditLookupError(str(exc)) from exc
        return balance or 0

    async def _run(
        self,
        request: AnalysisRequest,
        requester: Requester,
        balance: int,
    ) -> AnalysisOutcome:
        request_id = uuid.uuid4().hex[:ID_HEX_LENGTH]
        start = time.monotonic()
        try:
            resolved = await analyze(request, self._generator)
        except ModelCallError as exc:
            logger.warning(
                "event=analysis_failed request_id=%s error_class=%s",
                request_id,
                exc.error_class.value,
            )
            if self._audit:
                self._audit.log_error(request_id, "model_call", str(exc))
            raise

        outcome = AnalysisOutcome(
            report=resolved.report,
            used_fallback=resolved.used_fallback,
            credits_remaining=balance - ANALYSIS_CREDIT_COST,
        )
        if requester.user_id is not None:
            await self._persist(
                request, requester.user_id, outcome, request_id, balance
            )

        duration_ms = round((time.monotonic() - start) * 1000, 1)
        if self._audit:
            self._audit.log_analysis(
                request_id=request_id,
                context=request.context,
                text_length=len(request.text),
                score=outcome.report.score,
                verdict=outcome.report.verdict,
                used_fallback=outcome.used_fallback,
                duration_ms=duration_ms,
            )
        logger.info(
            "event=analysis_complete request_id=%s score=%s"
            " fallback=%s duration_ms=%.1f",
            request_id,
            outcome.report.score,
            outcome.used_fallback,
            duration_ms,
        )
        return outcome

    async def _persist(
        self,
        request: AnalysisRequest,
        user_id: str,
        outcome: AnalysisOutcome,
        request_id: str,
        balance: int,
    ) -> None:
        try:
            outcome.analysis_id = await self._store.save_analysis(
                user_id,
                request.text,
                outcome.report,
                context=request.context,
                used_fallback=outcome.used_fallback,
            )
        except Exception as exc:
            self._record_persistence_error(
                outcome, request_id, "save_analysis", exc
            )

        try:
            outcome.credits_remaining = await self._store.adjust_credits(
                user_id, -ANALYSIS_CREDIT_COST
            )
        except Exception as exc:
            outcome.credits_remaining = balance
            self._record_persistence_error(
                outcome, request_id, "adjust_credits", exc
            )

    def _record_persistence_error(
        self,
        outcome: AnalysisOutcome,
        request_id: str,
        operation: str,
        exc: Exception,
    ) -> None:
        logger.error(
            "event=persistence_failed request_id=%s operation=%s",
            request_id,
            operation,
            exc_info=True,
        )
        if self._audit:
            self._audit.log_error(request_id, operation, str(exc))
        outcome.persistence_errors.append(
            f"{operation}: {str(exc)[:ERROR_TRUNCATION_CHARS]}"
        )
