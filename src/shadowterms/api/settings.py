"""
API-specific settings.

Extends :class:`~shadowterms.core.settings.ShadowTermsBaseSettings` with
parameters that govern the REST transport (prefix, CORS, auth, database).

All values can be overridden via environment variables prefixed with
``SHADOW_`` (e.g. ``SHADOW_EDIT_TOKEN``, ``SHADOW_DATABASE_URL``).
"""

from __future__ import annotations

from pydantic import Field

from shadowterms import __version__
from shadowterms.core.settings import ShadowTermsBaseSettings


class ShadowTermsAPISettings(ShadowTermsBaseSettings):
    """Settings for the shadow-terms REST API.

    Order of precedence (highest → lowest):
        1. Environment variables (``SHADOW_API_PREFIX``, etc.)
        2. ``.env`` file
        3. Defaults below
    """

    # ── API ──────────────────────────────────────────────────────────────
    api_prefix: str = Field(default="/api/v1", description="URL prefix for all endpoints")
    api_title: str = Field(default="shadow-terms API", description="OpenAPI title")
    api_version: str = Field(default=__version__, description="OpenAPI version string")

    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = Field(default="sqlite:///shadow_terms.db", description="SQLite URL or path")

    # ── CORS ─────────────────────────────────────────────────────────────
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # ── Auth ─────────────────────────────────────────────────────────────
    api_key: str | None = Field(default=None, description="Optional API key for gating access")
    edit_token: str | None = Field(
        default=None,
        description="Token granting the edit capability (X-Edit-Token); unset grants it to everyone",
    )
