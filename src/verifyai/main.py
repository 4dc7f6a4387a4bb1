"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Phase 1: singleton logging, MUST run before any verifyai imports
# (they transitively import litellm which reads LITELLM_LOG at import time)
from verifyai.logging_config import setup_logging

setup_logging()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker  # noqa: E402

from verifyai import __version__  # noqa: E402
from verifyai.analysis.generator import LiteLLMReportGenerator  # noqa: E402
from verifyai.api.app_state import AppState  # noqa: E402
from verifyai.api.middleware.auth import ApiKeyMiddleware  # noqa: E402
from verifyai.api.routes import (  # noqa: E402
    analyses,
    credits,
    health,
    sample,
)
from verifyai.config import Settings, create_app_engine  # noqa: E402
from verifyai.logger import AnalysisLogger  # noqa: E402
from verifyai.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
)
from verifyai.models.base import Base  # noqa: E402
from verifyai.resilience.in_flight import InFlightGuard  # noqa: E402
from verifyai.services.analysis_service import (  # noqa: E402
    AnalysisService,
)
from verifyai.services.report_store import SqlReportStore  # noqa: E402

# Phase 2: Now that all imports (including litellm) are done,
# clear litellm's duplicate handlers.
cleanup_third_party_handlers()

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # 1. Use module-level settings (single source of truth)
    settings = _settings

    # 2. Create async engine (WAL set via pool-connect listener)
    engine = create_app_engine(
        settings.database_url, echo=settings.debug_mode
    )

    # 3. Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # 4. Create session factory
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    # 5. Initialize audit logger
    audit_logger = AnalysisLogger(
        log_dir=settings.log_dir, level=settings.log_level
    )

    # 6. Initialize services
    generator = LiteLLMReportGenerator(settings)
    store = SqlReportStore(session_factory, settings.starting_credits)
    guard = InFlightGuard()
    service = AnalysisService(
        generator,
        store,
        audit_logger=audit_logger,
        guard=guard,
        guest_credits=settings.guest_credits,
    )

    # 7. Store in app.state
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.typed = AppState(
        settings=settings,
        session_factory=session_factory,
        generator=generator,
        store=store,
        analysis_service=service,
        guard=guard,
        audit_logger=audit_logger,
    )

    # 8. Security: warn if auth is disabled
    if not settings.api_key:
        _logger.warning(
            "event=no_api_key action=all_endpoints_public"
        )
    _logger.info(
        "event=startup model_chain=%s",
        ",".join(settings.litellm_model_chain),
    )

    yield

    # Cleanup
    await engine.dispose()


app = FastAPI(
    title="VerifyAI",
    description=(
        "Forensic authorship analysis --"
        " human vs. AI-generated probability reports"
    ),
    version=__version__,
    openapi_url="/api/openapi.json",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

# Middleware stack (Starlette LIFO: last added = outermost = runs first)
#
# Inbound request order:
#   CORSMiddleware (outermost) -> ApiKeyMiddleware -> Router
#
# CORS must be outermost so OPTIONS preflight is answered before
# ApiKeyMiddleware rejects for missing X-API-Key.
_settings = Settings()
_cors_origins = [
    o.strip()
    for o in _settings.cors_origins.split(",")
    if o.strip()
]

app.add_middleware(ApiKeyMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-API-Key", "X-User-Id"],
    allow_credentials=False,
)

# Routes
app.include_router(health.router)
app.include_router(analyses.router)
app.include_router(credits.router)
app.include_router(sample.router)
