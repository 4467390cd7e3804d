"""
Common API schemas: shared envelopes and RFC 7807 errors.

Every endpoint returns either :class:`SuccessResponse` /
:class:`PagedResponse` or :class:`ProblemDetail` (4xx/5xx).  The
association endpoint is the exception: it keeps its own flat
``{success, message, posts}`` shape.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


# ── RFC 7807 Problem Detail ─────────────────────────────────────────────


class ErrorDetail(BaseModel):
    """Structured error detail for field-level or nested errors."""

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    field: str | None = Field(default=None, description="Field path if error is field-specific")


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs».

    Error Codes:
        - ``NOT_FOUND`` (404): Post, shadow term or index category does not exist
        - ``VALIDATION_FAILED`` (400): Invalid input data
        - ``FORBIDDEN`` (403): Caller lacks the edit capability
        - ``INTERNAL`` (500): Unexpected server error
    """

    type: str = Field(default="about:blank", description="Error type URI")
    title: str = Field(description="Short human-readable error summary")
    status: int = Field(description="HTTP status code")
    detail: str = Field(default="", description="Human-readable explanation of the error")
    instance: str = Field(default="", description="URI of the failing request")
    errors: list[ErrorDetail] = Field(default_factory=list, description="Field-level error details")


# ── Success Envelopes ────────────────────────────────────────────────────


class PageMeta(BaseModel):
    """Pagination metadata for list responses."""

    total: int = Field(description="Total items across all pages")
    limit: int = Field(description="Items per page (requested)")
    offset: int = Field(description="Current offset (0-based)")
    has_more: bool = Field(description="True if more pages exist after current")


class SuccessResponse(BaseModel, Generic[T]):
    """Standard success envelope for single-item responses."""

    data: T = Field(description="Response payload")
    elapsed_ms: float = Field(default=0.0, description="Server-side processing time in milliseconds")
    warnings: list[str] = Field(default_factory=list, description="Non-fatal warnings")


class PagedResponse(BaseModel, Generic[T]):
    """Paged success envelope for list responses."""

    data: list[T] = Field(description="Items on this page")
    meta: PageMeta = Field(description="Pagination metadata")
    elapsed_ms: float = Field(default=0.0, description="Server-side processing time in milliseconds")
