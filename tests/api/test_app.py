"""Tests for the application factory, health endpoints and middleware."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from shadowterms.api import create_app
from shadowterms.api.deps import can_edit, get_settings
from shadowterms.api.middleware.auth import AuthMiddleware, _is_bypass
from shadowterms.api.middleware.errors import status_for_error_code
from shadowterms.api.middleware.request_id import RequestIDMiddleware
from shadowterms.api.settings import ShadowTermsAPISettings


class TestCreateApp:
    def test_settings_on_state(self):
        settings = ShadowTermsAPISettings(database_url="memory", api_title="Test")
        app = create_app(settings=settings)
        assert app.state.settings is settings
        assert app.title == "Test"
        assert app.dependency_overrides[get_settings]() is settings

    def test_loads_registry_file(self, tmp_path, registry):
        path = tmp_path / "registry.yaml"
        path.write_text("post_types:\n  book:\n    connected: [post]\n", encoding="utf-8")
        create_app(settings=ShadowTermsAPISettings(database_url="memory", registry_file=path))
        assert registry.exists("book_connect")

    def test_openapi_under_prefix(self, client):
        assert client.get("/api/v1/openapi.json").status_code == 200


class TestHealth:
    def test_health(self, client):
        body = client.get("/health").json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"]["status"] == "healthy"

    def test_live(self, client):
        assert client.get("/health/live").json() == {"status": "alive"}

    def test_ready(self, client):
        assert client.get("/health/ready").status_code == 200


class TestRequestId:
    def test_generated(self, client):
        resp = client.get("/health/live")
        assert resp.headers["X-Request-ID"]

    def test_echoed(self, client):
        resp = client.get("/health/live", headers={"X-Request-ID": "abc-123"})
        assert resp.headers["X-Request-ID"] == "abc-123"

    def test_middleware_standalone(self):
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/ping")
        def ping():
            return {"ok": True}

        resp = TestClient(app).get("/ping")
        assert resp.status_code == 200
        assert "X-Request-ID" in resp.headers


class TestApiKey:
    def test_rejects_without_key(self, client_factory):
        client = client_factory(api_key="secret")
        resp = client.get("/api/v1/posts")
        assert resp.status_code == 401
        assert resp.json()["title"] == "Unauthorized"

    def test_accepts_header_or_query(self, client_factory):
        client = client_factory(api_key="secret")
        assert client.get("/api/v1/posts", headers={"X-API-Key": "secret"}).status_code == 200
        assert client.get("/api/v1/posts", params={"api_key": "secret"}).status_code == 200

    def test_health_bypasses(self, client_factory):
        client = client_factory(api_key="secret")
        assert client.get("/health/live").status_code == 200

    def test_bypass_patterns(self):
        assert _is_bypass("/health/ready") is True
        assert _is_bypass("/api/v1/docs") is True
        assert _is_bypass("/api/v1/posts") is False

    def test_middleware_disabled_without_key(self):
        app = FastAPI()
        app.add_middleware(AuthMiddleware, api_key=None)

        @app.get("/ping")
        def ping():
            return {"ok": True}

        assert TestClient(app).get("/ping").status_code == 200


class TestHelpers:
    def test_can_edit(self):
        open_settings = ShadowTermsAPISettings(database_url="memory")
        guarded = ShadowTermsAPISettings(database_url="memory", edit_token="t")
        assert can_edit(open_settings, None) is True
        assert can_edit(guarded, None) is False
        assert can_edit(guarded, "wrong") is False
        assert can_edit(guarded, "t") is True

    def test_status_for_error_code(self):
        assert status_for_error_code("NOT_FOUND") == 404
        assert status_for_error_code("NOT_PARTICIPATING") == 422
        assert status_for_error_code("SOMETHING_ELSE") == 500
