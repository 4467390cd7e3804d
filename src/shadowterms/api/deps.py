"""
FastAPI dependency injection: shared singletons and per-request factories.

Usage in routers::

    from shadowterms.api.deps import OpContext, require_edit_capability

    @router.post("/associations", dependencies=[Depends(require_edit_capability)])
    def associate(ctx: OpContext, body: AssociationRequestBody):
        ...

Tags:
    shadow-terms, api, dependency-injection, OpContext
"""

from __future__ import annotations

import hmac
import uuid
from collections.abc import Generator
from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, Header, Request

from shadowterms.api.settings import ShadowTermsAPISettings
from shadowterms.core.connection import create_connection
from shadowterms.core.errors import AuthorizationError
from shadowterms.core.registry import get_registry
from shadowterms.ops.context import OperationContext

# ── Settings (singleton) ─────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_settings() -> ShadowTermsAPISettings:
    """Cached settings: loaded once per process."""
    return ShadowTermsAPISettings()


# ── Database connection (per-request) ────────────────────────────────────


def get_connection(
    settings: Annotated[ShadowTermsAPISettings, Depends(get_settings)],
) -> Generator[Any, None, None]:
    """Yield a database connection for the request lifespan."""
    conn, _info = create_connection(settings.database_url, data_dir=settings.data_dir)
    try:
        yield conn
    finally:
        conn.close()


# ── Operation context (per-request) ──────────────────────────────────────


def get_operation_context(
    request: Request,
    conn: Annotated[Any, Depends(get_connection)],
    settings: Annotated[ShadowTermsAPISettings, Depends(get_settings)],
) -> OperationContext:
    """Build an :class:`OperationContext` from the current request."""
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    return OperationContext(
        conn=conn,
        registry=get_registry(),
        visible_status=settings.visible_status,
        request_id=request_id,
        caller="api",
    )


# ── Edit capability ──────────────────────────────────────────────────────


def can_edit(settings: ShadowTermsAPISettings, token: str | None) -> bool:
    """Return True when *token* grants the edit capability."""
    if settings.edit_token is None:
        return True
    return token is not None and hmac.compare_digest(token, settings.edit_token)


def require_edit_capability(
    settings: Annotated[ShadowTermsAPISettings, Depends(get_settings)],
    x_edit_token: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request (403) unless the caller holds the edit capability."""
    if not can_edit(settings, x_edit_token):
        raise AuthorizationError("Missing or invalid edit token. Provide X-Edit-Token header.")


# ── Convenience type aliases ─────────────────────────────────────────────

Settings = Annotated[ShadowTermsAPISettings, Depends(get_settings)]
Conn = Annotated[Any, Depends(get_connection)]
OpContext = Annotated[OperationContext, Depends(get_operation_context)]
EditCapability = Depends(require_edit_capability)
