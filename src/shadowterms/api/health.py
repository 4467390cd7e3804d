"""Health endpoints.

``create_health_router()`` gives the app three health endpoints:

- ``GET /health``        runs every check; 503 if a required one fails
- ``GET /health/ready``  same checks, 503 unless all are healthy
- ``GET /health/live``   always 200 while the process runs

Checks are plain callables returning ``True`` or raising.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

_START_TIME = time.monotonic()

Status = Literal["healthy", "degraded", "unhealthy"]


class CheckResult(BaseModel):
    """Result of a single dependency health check."""

    status: Status
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health response envelope returned by ``GET /health``."""

    status: Status = "healthy"
    service: str = ""
    version: str = ""
    uptime_s: float = Field(default_factory=lambda: round(time.monotonic() - _START_TIME, 1))
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    checks: dict[str, CheckResult] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    """Response for liveness checks."""

    status: str = "alive"


@dataclass
class HealthCheck:
    """One dependency check.  A failing non-required check only degrades."""

    name: str
    check_fn: Callable[[], Any]
    required: bool = True


def _run_checks(checks: list[HealthCheck]) -> dict[str, CheckResult]:
    results: dict[str, CheckResult] = {}
    for hc in checks:
        start = time.monotonic()
        try:
            hc.check_fn()
            results[hc.name] = CheckResult(status="healthy", latency_ms=round((time.monotonic() - start) * 1000, 2))
        except Exception as exc:  # noqa: BLE001
            results[hc.name] = CheckResult(
                status="unhealthy",
                latency_ms=round((time.monotonic() - start) * 1000, 2),
                error=str(exc)[:200],
            )
    return results


def _compute_status(results: dict[str, CheckResult], checks: list[HealthCheck]) -> Status:
    required = {hc.name for hc in checks if hc.required}
    down = {name for name, r in results.items() if r.status != "healthy"}
    if down & required:
        return "unhealthy"
    if down:
        return "degraded"
    return "healthy"


def create_health_router(
    service_name: str,
    version: str,
    checks: list[HealthCheck] | None = None,
    prefix: str = "/health",
) -> APIRouter:
    """Create an ``APIRouter`` with the health, readiness and liveness checks."""
    router = APIRouter(tags=["health"])
    _checks = checks or []

    def _body(status: Status, results: dict[str, CheckResult]) -> dict[str, Any]:
        return HealthResponse(status=status, service=service_name, version=version, checks=results).model_dump()

    @router.get(prefix, response_model=HealthResponse)
    def health() -> JSONResponse:
        """Primary health: runs all dependency checks."""
        results = _run_checks(_checks)
        status = _compute_status(results, _checks)
        return JSONResponse(content=_body(status, results), status_code=503 if status == "unhealthy" else 200)

    @router.get(f"{prefix}/ready", response_model=HealthResponse)
    def readiness() -> JSONResponse:
        """Readiness check: 503 unless every check passes."""
        results = _run_checks(_checks)
        status = _compute_status(results, _checks)
        return JSONResponse(content=_body(status, results), status_code=200 if status == "healthy" else 503)

    @router.get(f"{prefix}/live", response_model=LivenessResponse)
    def liveness() -> LivenessResponse:
        """Liveness check: always 200 if the process is running."""
        return LivenessResponse()

    return router
