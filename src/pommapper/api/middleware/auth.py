"""API key guard for the administrative routes.

Lookups, health and the OpenAPI pages stay public; only the routes
that rebuild, reload or report on the cache need ``X-API-Key`` once
``Settings.api_key`` is set.
"""

from __future__ import annotations

import hmac
import logging

from fastapi import Request, Response
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.responses import JSONResponse

from pommapper.api.schemas import APIResponse
from pommapper.constants import ADMIN_PATH_PREFIXES, API_KEY_HEADER

logger = logging.getLogger(__name__)


def requires_api_key(path: str) -> bool:
    """True for paths under one of the admin route groups."""
    return any(
        path == prefix or path.startswith(f"{prefix}/")
        for prefix in ADMIN_PATH_PREFIXES
    )


class ApiKeyMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        api_key = request.app.state.settings.api_key
        path = request.url.path
        if not api_key or not requires_api_key(path):
            return await call_next(request)

        provided = request.headers.get(API_KEY_HEADER, "")
        if hmac.compare_digest(provided.encode(), api_key.encode()):
            return await call_next(request)

        client = request.client.host if request.client else "unknown"
        logger.warning(
            "event=admin_auth_rejected method=%s path=%s client=%s",
            request.method,
            path,
            client,
        )
        body = APIResponse(success=False, error="Invalid or missing API key")
        return JSONResponse(
            status_code=401,
            content=body.model_dump(),
            headers={"WWW-Authenticate": API_KEY_HEADER},
        )
