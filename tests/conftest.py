"""Shared test fixtures: in-memory SQLite, async session, fake app."""

import os

# Force demo API keys for all tests so no real LLM call is made.
# These are set unconditionally at import time, so even if you have
# real keys in your shell environment, pytest overwrites them before
# any Settings() is created. To use real keys, edit these lines.
os.environ["GROQ_API_KEY"] = "for-demo-purposes-only"
os.environ["OPENAI_API_KEY"] = "for-demo-purposes-only"
os.environ["API_KEY"] = ""

import copy
import json
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
)

from verifyai.analysis.generator import ReportGenerator
from verifyai.api.dependencies import (
    Repos,
    get_analysis_service,
    get_report_store,
    get_repos,
)
from verifyai.config import Settings
from verifyai.logger import AnalysisLogger
from verifyai.main import app
from verifyai.models.base import Base
from verifyai.repositories.fakes import (
    FakeReportGenerator,
    FakeReportStore,
)
from verifyai.resilience.in_flight import InFlightGuard
from verifyai.services.analysis_service import AnalysisService

SOURCE_TEXT = (
    "The quarterly review showed steady growth across every region. "
    "Honestly, I did not expect the numbers to hold up this well! "
    "Our team worked late most nights to close the remaining deals. "
    "Next quarter we plan to expand into two new markets."
)

_BASE_PAYLOAD: dict[str, Any] = {
    "score": 82,
    "confidence": "High",
    "verdict": "AI-Assisted (Hybrid)",
    "plain_language_meaning": "Mostly machine-shaped prose.",
    "pattern_insights": "Uniform cadence with some human asides.",
    "key_observations": ["Uniform cadence", "Few typos", "One aside"],
    "stats": {
        "sentence_variance": {
            "result": "0.21 (Low)",
            "interpretation": "Sentences are similar in length.",
        },
        "lexical_density": {
            "result": "0.58 (High)",
            "interpretation": "Dense vocabulary.",
        },
        "burstiness": {
            "result": "0.30 (Flat)",
            "interpretation": "Little rhythmic variation.",
        },
        "insight": "Statistics lean toward generated text.",
    },
    "evidence": {
        "ai_patterns": ["Balanced clauses"],
        "human_signals": ["'Honestly,' aside"],
        "dominance_explanation": "AI patterns dominate.",
    },
    "forensic_deep_dive": {
        "structural_monotony": {
            "label": "Moderate",
            "description": "Repeated subject-verb openings.",
        },
        "fact_verification": {
            "status": "Unverified",
            "insight": "No checkable claims.",
        },
        "turing_friction": {
            "connective_tissue_count": 1,
            "detected_tokens": ["Next"],
            "explanation": "Sparse connectives.",
        },
    },
    "humanization_roadmap": ["Vary length", "Add detail", "Cut filler"],
    "verdict_bullets": ["Uniform", "Polished", "Predictable"],
    "recommendations": ["Ask for drafts", "Discuss the numbers"],
    "heatmap_annotations": [
        {
            "start_index": 0,
            "end_index": 62,
            "label": "AI_PATTERN",
            "color": "red",
            "tooltip_title": "Generic opener",
            "tooltip_explanation": "Summary-style first sentence.",
        },
        {
            "start_index": 63,
            "end_index": 123,
            "label": "HUMAN_PATTERN",
            "color": "blue",
            "tooltip_title": "Personal aside",
            "tooltip_explanation": "Emotional interjection.",
        },
        {
            "start_index": 124,
            "end_index": 186,
            "label": "AI_PATTERN",
            "color": "red",
            "tooltip_title": "Even cadence",
            "tooltip_explanation": "Same length as its neighbours.",
        },
    ],
}


def report_payload(**overrides: Any) -> dict[str, Any]:
    """A well-formed model response as a dict, with overrides."""
    payload = copy.deepcopy(_BASE_PAYLOAD)
    payload.update(overrides)
    return payload


def report_json(**overrides: Any) -> str:
    """A well-formed model response as raw JSON text."""
    return json.dumps(report_payload(**overrides))


def setup_test_app(
    tmp_path: Path,
    *,
    generator: ReportGenerator | None = None,
    store: FakeReportStore | None = None,
) -> tuple[FakeReportStore, AnalysisService]:
    """Common app-state setup for API test fixtures.

    Wires a FakeReportStore and a scripted generator into an
    AnalysisService and installs dependency overrides. Returns
    (store, service) so fixtures can seed data.
    """
    store = store if store is not None else FakeReportStore()
    generator = generator or FakeReportGenerator([report_json()])
    settings = Settings(database_url="sqlite:///:memory:")
    service = AnalysisService(
        generator,
        store,
        audit_logger=AnalysisLogger(
            log_dir=Path(tmp_path / "logs"), level="WARNING"
        ),
        guard=InFlightGuard(),
        guest_credits=settings.guest_credits,
    )
    fake_repos = Repos(analysis=store.analyses, credits=store.credits)

    app.state.settings = settings

    app.dependency_overrides[get_repos] = lambda: fake_repos
    app.dependency_overrides[get_report_store] = lambda: store
    app.dependency_overrides[get_analysis_service] = lambda: service

    return store, service


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def engine():
    """Session-scoped engine: one CREATE TABLE per test suite."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    """Function-scoped session with connection-level rollback.

    Wraps each test in a connection-level transaction so that
    even ``session.commit()`` calls inside tests are rolled
    back at teardown, keeping the shared engine clean.
    """
    async with engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(
            bind=connection, expire_on_commit=False
        )
        yield session
        await session.close()
        await transaction.rollback()
