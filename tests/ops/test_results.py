"""Tests for ``shadowterms.ops.result`` and ``shadowterms.ops.requests``."""

from __future__ import annotations

import pytest

from shadowterms.core.errors import AuthorizationError, NotFoundError, RegistrationError
from shadowterms.ops.requests import coerce_id
from shadowterms.ops.result import OperationResult, PagedResult, start_timer


class TestOperationResult:
    def test_ok(self):
        result = OperationResult.ok({"id": 1}, warnings=["w"])
        assert result.success is True
        assert result.to_dict() == {"success": True, "data": {"id": 1}, "warnings": ["w"]}

    def test_fail(self):
        result = OperationResult.fail("NOT_FOUND", "gone", details={"post_id": 1})
        assert result.to_dict() == {
            "success": False,
            "error": {"code": "NOT_FOUND", "message": "gone", "details": {"post_id": 1}},
        }

    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (NotFoundError("gone"), "NOT_FOUND"),
            (AuthorizationError("no"), "FORBIDDEN"),
            (RegistrationError("clash"), "CONFIG_INVALID"),
            (RuntimeError("boom"), "INTERNAL"),
        ],
    )
    def test_from_exception(self, exc, code):
        assert OperationResult.from_exception(exc).error.code == code


class TestPagedResult:
    def test_has_more(self):
        page = PagedResult.from_items([1, 2], total=5, limit=2, offset=0)
        assert page.has_more is True
        assert page.to_dict()["total"] == 5

    def test_last_page(self):
        assert PagedResult.from_items([5], total=5, limit=2, offset=4).has_more is False


class TestTimer:
    def test_elapsed_non_negative(self):
        assert start_timer().elapsed_ms >= 0


class TestCoerceId:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(7, 7), ("7", 7), ("7.9", 7), (7.2, 7), ("abc", 0), (None, 0), (True, 0), ("", 0), ([], 0)],
    )
    def test_coerce(self, raw, expected):
        assert coerce_id(raw) == expected
