"""Protocol-based repository interfaces.

SQL implementations satisfy these protocols structurally (no inheritance).
Test doubles can be plain classes or mocks matching the same signature.
"""

from typing import Protocol

from verifyai.models.analysis import AnalysisRecord


class AnalysisRepository(Protocol):
    async def create(self, record: AnalysisRecord) -> AnalysisRecord: ...
    async def get_by_id(
        self, analysis_id: str
    ) -> AnalysisRecord | None: ...
    async def list_recent(
        self, user_id: str, limit: int
    ) -> list[AnalysisRecord]: ...
    async def delete_for_user(self, user_id: str) -> int: ...


class CreditRepository(Protocol):
    async def get_balance(self, user_id: str) -> int | None: ...
    async def open_account(self, user_id: str, credits: int) -> int: ...
    async def adjust(self, user_id: str, delta: int) -> int: ...
