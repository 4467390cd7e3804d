"""Fixtures for API tests: an app bound to the shared in-memory connection."""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from shadowterms.api import create_app
from shadowterms.api.deps import get_connection
from shadowterms.api.settings import ShadowTermsAPISettings


@pytest.fixture
def edit_token() -> str:
    return "let-me-edit"


@pytest.fixture
def client_factory(conn) -> Callable[..., TestClient]:
    """Build a client for an app with the given setting overrides."""

    def make(**overrides) -> TestClient:
        settings = ShadowTermsAPISettings(database_url="memory", **overrides)
        app = create_app(settings=settings)
        app.dependency_overrides[get_connection] = lambda: conn
        return TestClient(app)

    return make


@pytest.fixture
def client(client_factory) -> TestClient:
    """Client for an app with no edit token configured (edits allowed)."""
    return client_factory()


@pytest.fixture
def guarded_client(client_factory, edit_token) -> TestClient:
    """Client for an app that requires ``X-Edit-Token``."""
    return client_factory(edit_token=edit_token)
