"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field


class APIResponse(BaseModel):
    """Standard response envelope for all API endpoints."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/analyses.

    ``context`` is checked by the route so an unknown value is an
    input rejection rather than a validation error.
    """

    text: str = Field(max_length=100_000)
    context: str = "GENERAL"
    guest_credits: int | None = Field(default=None, ge=0)
    session_id: str | None = Field(default=None, max_length=128)
