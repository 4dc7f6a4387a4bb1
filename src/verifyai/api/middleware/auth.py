"""Optional shared API key in front of the analysis endpoints."""

from __future__ import annotations

import hmac

from fastapi import Request, Response
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.responses import JSONResponse

from verifyai.api.schemas import APIResponse
from verifyai.constants import (
    API_KEY_HEADER,
    AUTH_EXEMPT_PATHS,
    AUTH_EXEMPT_PREFIXES,
)


def _is_exempt(request: Request) -> bool:
    # CORS preflight never carries custom headers
    if request.method == "OPTIONS":
        return True
    path = request.url.path
    return path in AUTH_EXEMPT_PATHS or path.startswith(
        AUTH_EXEMPT_PREFIXES
    )


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require ``X-API-Key`` when ``Settings.api_key`` is set.

    With no key configured every request passes. The key only gates
    the deployment; users are still identified by ``X-User-Id``.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        expected: str = request.app.state.settings.api_key
        if not expected or _is_exempt(request):
            return await call_next(request)

        provided = request.headers.get(API_KEY_HEADER, "")
        if hmac.compare_digest(provided.encode(), expected.encode()):
            return await call_next(request)

        return JSONResponse(
            status_code=401,
            content=APIResponse(
                success=False, error="Invalid or missing API key"
            ).model_dump(),
        )
