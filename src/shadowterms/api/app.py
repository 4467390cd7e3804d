"""
FastAPI application factory.

``create_app()`` wires middleware, routers, error handlers, and
lifespan events into a single ``FastAPI`` instance.

The index category registry is loaded from ``settings.registry_file``
when the app is built, so it is in place before the first request even
when the lifespan does not run (e.g. a bare ``TestClient``).

Tags:
    shadow-terms, api, app-factory, composition-root, FastAPI
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shadowterms.api.deps import get_settings
from shadowterms.api.health import HealthCheck, create_health_router
from shadowterms.api.middleware.auth import AuthMiddleware
from shadowterms.api.middleware.errors import shadow_terms_error_handler, unhandled_exception_handler
from shadowterms.api.middleware.request_id import RequestIDMiddleware
from shadowterms.api.settings import ShadowTermsAPISettings
from shadowterms.core.connection import create_connection
from shadowterms.core.errors import ShadowTermsError
from shadowterms.core.logging import configure_logging, get_logger
from shadowterms.core.registry import RegistrationSpec, get_registry

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging and create tables."""
    settings: ShadowTermsAPISettings = app.state.settings
    configure_logging(level=settings.log_level, service="shadow-terms-api")
    logger.info("api.starting", version=app.version)

    conn = None
    try:
        conn, info = create_connection(settings.database_url, init_schema=True, data_dir=settings.data_dir)
        logger.info("database.initialized", backend=info.backend, persistent=info.persistent)
    except Exception as e:
        logger.warning("database.init_failed", error=str(e))
    finally:
        if conn is not None:
            conn.close()

    yield
    logger.info("api.stopping")


def _database_check(settings: ShadowTermsAPISettings) -> HealthCheck:
    def check() -> bool:
        conn, _info = create_connection(settings.database_url, data_dir=settings.data_dir)
        try:
            conn.execute("SELECT 1")
        finally:
            conn.close()
        return True

    return HealthCheck("database", check)


def create_app(*, settings: ShadowTermsAPISettings | None = None) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : ShadowTermsAPISettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    if settings.registry_file is not None:
        get_registry().load(RegistrationSpec.from_yaml_file(settings.registry_file))

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(AuthMiddleware, api_key=settings.api_key)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(ShadowTermsError, shadow_terms_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from shadowterms.api.routers import associations, index, posts

    prefix = settings.api_prefix

    app.include_router(
        create_health_router("shadow-terms", version=settings.api_version, checks=[_database_check(settings)]),
    )
    app.include_router(associations.router, prefix=prefix, tags=["associations"])
    app.include_router(posts.router, prefix=prefix, tags=["posts"])
    app.include_router(index.router, prefix=prefix, tags=["index"])

    return app
