"""
Operation result envelope.

Provides :class:`OperationResult`: a typed success/failure envelope that
every operation function returns, carrying *warnings*, *elapsed_ms* and
*metadata* alongside the payload.  :meth:`OperationResult.from_exception`
turns a :class:`~shadowterms.core.errors.ShadowTermsError` into the
matching failure code.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, TypeVar

from shadowterms.core.errors import ErrorCategory, ShadowTermsError, categorize_error

T = TypeVar("T")

#: Failure code per error category.
CATEGORY_TO_CODE: dict[ErrorCategory, str] = {
    ErrorCategory.VALIDATION: "VALIDATION_FAILED",
    ErrorCategory.NOT_FOUND: "NOT_FOUND",
    ErrorCategory.CONFIG: "CONFIG_INVALID",
    ErrorCategory.AUTH: "FORBIDDEN",
    ErrorCategory.STORAGE: "INTERNAL",
    ErrorCategory.INTERNAL: "INTERNAL",
}


@dataclass(frozen=True, slots=True)
class OperationError:
    """Structured error detail for failed operations.

    Attributes:
        code: Machine-readable code (``NOT_FOUND``, ``VALIDATION_FAILED``, …).
        message: Human-readable description of the error.
        category: Optional :class:`ErrorCategory` for routing.
        details: Extra key/value context.
        retryable: Whether the caller should retry the operation.
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)
    retryable: bool = False


@dataclass
class OperationResult[T]:
    """Envelope returned by every operation function.

    Use the factories :meth:`ok`, :meth:`fail` and :meth:`from_exception`
    rather than the constructor.
    """

    success: bool
    data: T | None = None
    error: OperationError | None = None
    warnings: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(
        cls,
        data: T,
        *,
        warnings: list[str] | None = None,
        elapsed_ms: float = 0.0,
        metadata: dict[str, Any] | None = None,
    ) -> OperationResult[T]:
        """Create a successful result."""
        return cls(
            success=True,
            data=data,
            warnings=warnings or [],
            elapsed_ms=elapsed_ms,
            metadata=metadata or {},
        )

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        """Create a failed result."""
        return cls(
            success=False,
            error=OperationError(
                code=code,
                message=message,
                category=category,
                details=details or {},
                retryable=retryable,
            ),
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def from_exception(cls, exc: Exception, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        """Create a failed result whose code follows the error's category."""
        category = categorize_error(exc)
        details = exc.context.to_dict() if isinstance(exc, ShadowTermsError) else {}
        return cls.fail(
            CATEGORY_TO_CODE.get(category, "INTERNAL"),
            str(exc),
            category=category,
            details=details,
            retryable=getattr(exc, "retryable", False),
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (for JSON output)."""
        d: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            d["data"] = self.data
        if self.error is not None:
            d["error"] = {"code": self.error.code, "message": self.error.message}
            if self.error.details:
                d["error"]["details"] = self.error.details
        if self.warnings:
            d["warnings"] = self.warnings
        if self.elapsed_ms:
            d["elapsed_ms"] = round(self.elapsed_ms, 2)
        return d


@dataclass
class PagedResult(OperationResult[list[T]]):
    """Paginated result for list operations."""

    total: int = 0
    limit: int = 50
    offset: int = 0
    has_more: bool = False

    @classmethod
    def from_items(
        cls,
        items: list[T],
        total: int,
        *,
        limit: int = 50,
        offset: int = 0,
        elapsed_ms: float = 0.0,
    ) -> PagedResult[T]:
        """Build a page; ``has_more`` is computed from *total*."""
        return cls(
            success=True,
            data=items,
            total=total,
            limit=limit,
            offset=offset,
            has_more=(offset + limit) < total,
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d.update(total=self.total, limit=self.limit, offset=self.offset, has_more=self.has_more)
        return d


class _Timer:
    """Minimal stopwatch for timing operations."""

    __slots__ = ("_start",)

    def __init__(self) -> None:
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000


def start_timer() -> _Timer:
    """Return a lightweight timer.  Use ``timer.elapsed_ms`` when done."""
    return _Timer()
