"""
Error handling: maps ops-layer error codes and package exceptions to
RFC 7807 responses.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from shadowterms.api.schemas.common import ErrorDetail, ProblemDetail
from shadowterms.core.errors import ErrorCategory, ShadowTermsError
from shadowterms.core.logging import get_logger

logger = get_logger(__name__)

# ── Error code → HTTP status mapping ─────────────────────────────────────

ERROR_CODE_TO_STATUS: dict[str, int] = {
    "NOT_FOUND": 404,
    "VALIDATION_FAILED": 400,
    "NOT_PARTICIPATING": 422,
    "FORBIDDEN": 403,
    "CONFIG_INVALID": 500,
    "INTERNAL": 500,
}

CATEGORY_TO_STATUS: dict[ErrorCategory, int] = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.AUTH: 403,
    ErrorCategory.CONFIG: 500,
    ErrorCategory.STORAGE: 503,
    ErrorCategory.INTERNAL: 500,
}

_TITLES: dict[int, str] = {
    400: "Bad Request",
    403: "Forbidden",
    404: "Not Found",
    422: "Unprocessable Entity",
    503: "Service Unavailable",
}


def status_for_error_code(code: str) -> int:
    """Resolve an ops error code to HTTP status, defaulting to 500."""
    return ERROR_CODE_TO_STATUS.get(code, 500)


def problem_response(
    *,
    status: int,
    title: str,
    detail: str = "",
    instance: str = "",
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    """Build a RFC 7807 JSON error response."""
    body = ProblemDetail(title=title, status=status, detail=detail, instance=instance)
    if errors:
        body.errors = [ErrorDetail(**e) for e in errors]
    return JSONResponse(status_code=status, content=body.model_dump())


async def shadow_terms_error_handler(request: Request, exc: ShadowTermsError) -> JSONResponse:
    """Render a :class:`ShadowTermsError` raised by a route or dependency."""
    status = CATEGORY_TO_STATUS.get(exc.category, 500)
    logger.warning("request.rejected", status=status, error=exc.message, category=exc.category.value)
    return problem_response(
        status=status,
        title=_TITLES.get(status, "Internal Server Error"),
        detail=exc.message,
        instance=str(request.url),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: returns 500 with ProblemDetail."""
    logger.exception("request.unhandled_exception", error=str(exc))
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail=str(exc) if request.app.state.settings.debug else "An unexpected error occurred.",
        instance=str(request.url),
    )
