"""CRUD tests for SqlAnalysisRepository."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from verifyai.constants import AnalysisContext, Verdict
from verifyai.models.analysis import AnalysisRecord
from verifyai.repositories.analysis_repo import SqlAnalysisRepository

_T0 = datetime(2026, 1, 1, tzinfo=UTC)


def _record(
    user_id: str, minutes: int = 0, **kwargs: object
) -> AnalysisRecord:
    fields: dict[str, object] = {
        "user_id": user_id,
        "input_text": "some text under analysis",
        "context": AnalysisContext.GENERAL,
        "report_json": '{"score": 80}',
        "score": 80.0,
        "verdict": Verdict.HYBRID,
        "created_at": _T0 + timedelta(minutes=minutes),
    }
    fields.update(kwargs)
    return AnalysisRecord(**fields)


@pytest.fixture
def repo(session: AsyncSession) -> SqlAnalysisRepository:
    return SqlAnalysisRepository(session)


async def test_create_and_get(
    repo: SqlAnalysisRepository, session: AsyncSession,
) -> None:
    created = await repo.create(
        _record("u1", context=AnalysisContext.HR, used_fallback=True)
    )
    await session.commit()

    fetched = await repo.get_by_id(created.id)
    assert fetched is not None
    assert fetched.user_id == "u1"
    assert fetched.context == "HR"
    assert fetched.used_fallback is True
    assert fetched.to_dict()["report"] == {"score": 80}


async def test_get_missing(repo: SqlAnalysisRepository) -> None:
    assert await repo.get_by_id("nope") is None


async def test_list_recent_newest_first(
    repo: SqlAnalysisRepository, session: AsyncSession,
) -> None:
    for minutes in (1, 3, 2):
        await repo.create(_record("u1", minutes, score=float(minutes)))
    await repo.create(_record("u2", 10))
    await session.commit()

    records = await repo.list_recent("u1", limit=12)
    assert [r.score for r in records] == [3.0, 2.0, 1.0]


async def test_list_recent_respects_limit(
    repo: SqlAnalysisRepository, session: AsyncSession,
) -> None:
    for minutes in range(15):
        await repo.create(_record("u1", minutes))
    await session.commit()

    records = await repo.list_recent("u1", limit=12)
    assert len(records) == 12


async def test_delete_for_user(
    repo: SqlAnalysisRepository, session: AsyncSession,
) -> None:
    await repo.create(_record("u1", 1))
    await repo.create(_record("u1", 2))
    keep = await repo.create(_record("u2", 3))
    await session.commit()

    assert await repo.delete_for_user("u1") == 2
    assert await repo.list_recent("u1", limit=12) == []
    assert await repo.get_by_id(keep.id) is not None


def test_to_dict_without_report() -> None:
    data = _record("u1").to_dict(include_report=False)
    assert "report" not in data
    assert data["verdict"] == "AI-Assisted (Hybrid)"
