"""Typed application state: replaces untyped getattr() access."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from verifyai.analysis.generator import ReportGenerator
from verifyai.config import Settings
from verifyai.logger import AnalysisLogger
from verifyai.resilience.in_flight import InFlightGuard
from verifyai.services.analysis_service import AnalysisService
from verifyai.services.report_store import ReportStore


@dataclass
class AppState:
    """Typed container for app.state attributes."""

    settings: Settings
    session_factory: async_sessionmaker[AsyncSession]
    generator: ReportGenerator
    store: ReportStore
    analysis_service: AnalysisService
    guard: InFlightGuard
    audit_logger: AnalysisLogger | None = None
