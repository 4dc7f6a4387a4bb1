"""SQL implementation of AnalysisRepository."""

from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from verifyai.models.analysis import AnalysisRecord


class SqlAnalysisRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, record: AnalysisRecord) -> AnalysisRecord:
        self._session.add(record)
        await self._session.flush()
        return record

    async def get_by_id(self, analysis_id: str) -> AnalysisRecord | None:
        result = await self._session.execute(
            select(AnalysisRecord).where(AnalysisRecord.id == analysis_id)
        )
        return result.scalar_one_or_none()

    async def list_recent(
        self, user_id: str, limit: int
    ) -> list[AnalysisRecord]:
        result = await self._session.execute(
            select(AnalysisRecord)
            .where(AnalysisRecord.user_id == user_id)
            .order_by(AnalysisRecord.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def delete_for_user(self, user_id: str) -> int:
        result = await self._session.execute(
            sa_delete(AnalysisRecord).where(
                AnalysisRecord.user_id == user_id
            )
        )
        await self._session.flush()
        rowcount: int = getattr(result, "rowcount", 0) or 0
        return rowcount
