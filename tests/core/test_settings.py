"""Tests for ``shadowterms.core.settings`` and ``shadowterms.api.settings``."""

from __future__ import annotations

from pathlib import Path

from shadowterms.api.settings import ShadowTermsAPISettings
from shadowterms.core.settings import ShadowTermsBaseSettings


class TestBaseSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("SHADOW_VISIBLE_STATUS", raising=False)
        settings = ShadowTermsBaseSettings(_env_file=None)
        assert settings.visible_status == "publish"
        assert settings.registry_file is None
        assert settings.data_dir == Path.home() / ".shadow-terms"

    def test_env_prefix(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SHADOW_VISIBLE_STATUS", "live")
        monkeypatch.setenv("SHADOW_REGISTRY_FILE", str(tmp_path / "registry.yaml"))
        settings = ShadowTermsBaseSettings(_env_file=None)
        assert settings.visible_status == "live"
        assert settings.registry_file == tmp_path / "registry.yaml"


class TestApiSettings:
    def test_defaults(self):
        settings = ShadowTermsAPISettings(_env_file=None)
        assert settings.api_prefix == "/api/v1"
        assert settings.edit_token is None

    def test_edit_token_from_env(self, monkeypatch):
        monkeypatch.setenv("SHADOW_EDIT_TOKEN", "s3cret")
        assert ShadowTermsAPISettings(_env_file=None).edit_token == "s3cret"
