"""Optional API key authentication middleware."""

from __future__ import annotations

import hmac

from fastapi import Request, Response
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.responses import JSONResponse

from lumina.constants import (
    AUTH_EXEMPT_PATHS,
    AUTH_EXEMPT_PREFIXES,
)


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require a matching X-API-Key header once a key is configured.

    With ``Settings.api_key`` empty every request passes. Health and
    docs paths stay public either way.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if path in AUTH_EXEMPT_PATHS or path.startswith(
            AUTH_EXEMPT_PREFIXES
        ):
            return await call_next(request)

        api_key = request.app.state.typed.settings.api_key
        if not api_key:
            return await call_next(request)

        provided = request.headers.get("X-API-Key", "")
        if not hmac.compare_digest(provided, api_key):
            return JSONResponse(
                status_code=401,
                content={
                    "error": "unauthorized",
                    "message": "Invalid or missing API key",
                },
            )

        return await call_next(request)
