"""
API-key authentication middleware.

When ``SHADOW_API_KEY`` is set, every request must include a matching
``X-API-Key`` header (or ``?api_key=`` query param).  Unauthenticated
requests receive a 401 ProblemDetail.

This gates the whole API.  The finer edit capability required by write
endpoints is checked per route (see :func:`shadowterms.api.deps.require_edit_capability`).

Bypass paths (no auth required):
  - ``/health/*``
  - ``/docs``, ``/redoc``, ``/openapi.json``
"""

from __future__ import annotations

import re

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

_BYPASS_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"^/health"),
    re.compile(r"/docs$"),
    re.compile(r"/redoc$"),
    re.compile(r"/openapi\.json$"),
]


def _is_bypass(path: str) -> bool:
    """Return True if *path* should skip authentication."""
    return any(p.search(path) for p in _BYPASS_PATTERNS)


class AuthMiddleware(BaseHTTPMiddleware):
    """Reject requests that lack a valid API key.

    ``api_key=None`` (the default) disables enforcement.
    """

    def __init__(self, app: object, api_key: str | None = None) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._api_key = api_key

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if self._api_key is None or _is_bypass(request.url.path):
            return await call_next(request)

        provided = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if provided != self._api_key:
            return JSONResponse(
                status_code=401,
                content={
                    "type": "about:blank",
                    "title": "Unauthorized",
                    "status": 401,
                    "detail": "Missing or invalid API key. Provide X-API-Key header.",
                    "instance": str(request.url),
                    "errors": [],
                },
            )

        return await call_next(request)
