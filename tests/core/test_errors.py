"""Tests for ``shadowterms.core.errors``."""

from __future__ import annotations

from shadowterms.core.errors import (
    AuthorizationError,
    ErrorCategory,
    NotFoundError,
    ShadowTermsError,
    StorageError,
    ValidationError,
    categorize_error,
)


class TestCategories:
    def test_defaults(self):
        assert ValidationError("x").category is ErrorCategory.VALIDATION
        assert NotFoundError("x").category is ErrorCategory.NOT_FOUND
        assert AuthorizationError("x").category is ErrorCategory.AUTH
        assert StorageError("x").retryable is True
        assert ShadowTermsError("x").retryable is False

    def test_categorize_foreign(self):
        assert categorize_error(RuntimeError("boom")) is ErrorCategory.INTERNAL
        assert categorize_error(NotFoundError("gone")) is ErrorCategory.NOT_FOUND


class TestContext:
    def test_with_context(self):
        err = NotFoundError("Post 7 not found").with_context(post_id=7, attempt=2)
        assert err.context.post_id == 7
        assert err.context.metadata == {"attempt": 2}

    def test_to_dict(self):
        cause = OSError("disk full")
        err = StorageError("write failed", cause=cause).with_context(index_category="example_connect")
        d = err.to_dict()
        assert d["error_type"] == "StorageError"
        assert d["category"] == "STORAGE"
        assert d["context"]["index_category"] == "example_connect"
        assert d["cause"] == "disk full"
        assert err.__cause__ is cause
