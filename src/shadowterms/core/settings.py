"""Shared base settings for shadow-terms services.

``ShadowTermsBaseSettings`` carries the knobs every entry point needs
(bind address, log level, data directory, visible status, registry
file).  The API settings extend it with HTTP-specific fields.

Examples:
    >>> from shadowterms.core.settings import ShadowTermsBaseSettings
    >>> ShadowTermsBaseSettings().visible_status
    'publish'

Tags:
    settings, configuration, pydantic, environment, shadow-terms

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shadowterms.core.models import VISIBLE_STATUS


class ShadowTermsBaseSettings(BaseSettings):
    """Common settings shared across shadow-terms entry points.

    Fields
    ──────
    host           : Bind address for the HTTP transport
    port           : Bind port for the HTTP transport
    debug          : Enable debug mode (verbose logging, error details)
    log_level      : Structlog log level
    data_dir       : Directory for relative SQLite paths
    visible_status : The status that makes a post publicly visible
    registry_file  : Optional YAML file declaring index categories
    """

    model_config = SettingsConfigDict(
        env_prefix="SHADOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Network ──────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8000

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"

    # ── Storage ──────────────────────────────────────────────────
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".shadow-terms",
        description="Directory used to resolve relative SQLite paths",
    )

    # ── Reconciliation ───────────────────────────────────────────
    visible_status: str = Field(default=VISIBLE_STATUS, description="Status that keeps a shadow term alive")
    registry_file: Path | None = Field(default=None, description="YAML file declaring index categories")
