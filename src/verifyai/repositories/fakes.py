"""In-memory fakes for testing.

Dict-backed repositories, a report store with failure injection, and
a scripted model generator. No SQLAlchemy, no network.
"""

# pyright: reportUnusedFunction=false

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta

from verifyai.analysis.schemas import Report
from verifyai.constants import (
    DEFAULT_STARTING_CREDITS,
    ID_HEX_LENGTH,
    AnalysisContext,
)
from verifyai.models.analysis import AnalysisRecord
from verifyai.prompts import AnalysisPrompts


class FakeAnalysisRepository:
    """Dict-backed AnalysisRepository for testing."""

    def __init__(self) -> None:
        self._store: dict[str, AnalysisRecord] = {}

    async def create(self, record: AnalysisRecord) -> AnalysisRecord:
        if not record.id:
            record.id = uuid.uuid4().hex[:ID_HEX_LENGTH]
        # Strictly increasing timestamps keep ordering deterministic
        # when records are created within the same clock tick.
        record.created_at = datetime.now(UTC) + timedelta(
            microseconds=len(self._store)
        )
        self._store[record.id] = record
        return record

    async def get_by_id(self, analysis_id: str) -> AnalysisRecord | None:
        return self._store.get(analysis_id)

    async def list_recent(
        self, user_id: str, limit: int
    ) -> list[AnalysisRecord]:
        records = [
            r for r in self._store.values() if r.user_id == user_id
        ]
        records.sort(key=lambda r: r.created_at, reverse=True)
        return records[:limit]

    async def delete_for_user(self, user_id: str) -> int:
        keys = [
            k for k, r in self._store.items() if r.user_id == user_id
        ]
        for k in keys:
            del self._store[k]
        return len(keys)


class FakeCreditRepository:
    """Dict-backed CreditRepository for testing."""

    def __init__(self, balances: dict[str, int] | None = None) -> None:
        self._store: dict[str, int] = dict(balances or {})

    async def get_balance(self, user_id: str) -> int | None:
        return self._store.get(user_id)

    async def open_account(self, user_id: str, credits: int) -> int:
        return self._store.setdefault(user_id, credits)

    async def adjust(self, user_id: str, delta: int) -> int:
        if user_id not in self._store:
            raise LookupError(f"no credit account for user {user_id}")
        self._store[user_id] += delta
        return self._store[user_id]


class FakeReportStore:
    """ReportStore over fake repositories, with failure injection.

    ``calls`` records the order of write operations so tests can
    assert "save then decrement".
    """

    def __init__(
        self,
        balances: dict[str, int] | None = None,
        *,
        starting_credits: int = DEFAULT_STARTING_CREDITS,
        fail_save: bool = False,
        fail_adjust: bool = False,
    ) -> None:
        self.analyses = FakeAnalysisRepository()
        self.credits = FakeCreditRepository(balances)
        self.starting_credits = starting_credits
        self.fail_save = fail_save
        self.fail_adjust = fail_adjust
        self.calls: list[str] = []

    async def save_analysis(
        self,
        user_id: str,
        source_text: str,
        report: Report,
        *,
        context: AnalysisContext = AnalysisContext.GENERAL,
        used_fallback: bool = False,
    ) -> str:
        self.calls.append("save_analysis")
        if self.fail_save:
            raise RuntimeError("insert failed")
        record = await self.analyses.create(
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
        return record.id

    async def adjust_credits(self, user_id: str, delta: int) -> int:
        self.calls.append("adjust_credits")
        if self.fail_adjust:
            raise RuntimeError("update failed")
        return await self.credits.adjust(user_id, delta)

    async def get_balance(self, user_id: str) -> int | None:
        return await self.credits.open_account(
            user_id, self.starting_credits
        )

    async def clear_history(self, user_id: str) -> int:
        self.calls.append("clear_history")
        return await self.analyses.delete_for_user(user_id)


class FakeReportGenerator:
    """Scripted ReportGenerator.

    Returns the queued responses in order (the last one repeats).
    A queued exception instance is raised instead of returned.
    """

    def __init__(self, responses: Sequence[str | Exception]) -> None:
        if not responses:
            raise ValueError("FakeReportGenerator needs a response")
        self._responses = list(responses)
        self.prompts: list[AnalysisPrompts] = []

    async def generate(self, prompts: AnalysisPrompts) -> str:
        self.prompts.append(prompts)
        index = min(len(self.prompts) - 1, len(self._responses) - 1)
        response = self._responses[index]
        if isinstance(response, Exception):
            raise response
        return response
