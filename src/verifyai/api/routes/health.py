"""Liveness endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter, Request

from verifyai import __version__

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(request: Request) -> dict[str, str]:
    """Liveness plus the primary model reports are requested from.

    Never touches the model or the database, so it stays cheap enough
    for load balancer probes.
    """
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "version": __version__,
        "model": settings.litellm_model_chain[0],
        "timestamp": datetime.now(UTC).isoformat(),
    }
