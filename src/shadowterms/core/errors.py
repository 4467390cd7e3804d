"""
Structured error types for shadow terms.

Every error raised by this package extends :class:`ShadowTermsError` and
carries a category, a retry flag, structured context and an optional
chained cause, so callers can log it with ``to_dict()`` and route it
without string matching.

Most of the reconciliation path never raises: "not participating" and
"not found" are ordinary outcomes that fall through to a no-op.  These
types exist for the edges where a caller genuinely did something wrong
(bad registration, bad request, missing capability) or where the storage
collaborator failed.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────┐
        │                   ShadowTermsError                       │
        │        (category, retryable, context, cause)             │
        ├─────────────────────────────────────────────────────────┤
        │  ValidationError     NotFoundError     ConfigError       │
        │  (VALIDATION)        (NOT_FOUND)       (CONFIG)          │
        │                                            │             │
        │  AuthorizationError  StorageError     RegistrationError  │
        │  (AUTH)              (STORAGE)                           │
        └─────────────────────────────────────────────────────────┘

Examples:
    >>> error = RegistrationError("post type 'page' already registered")
    >>> error.category
    <ErrorCategory.CONFIG: 'CONFIG'>
    >>> error.with_context(post_type="page").to_dict()["context"]
    {'post_type': 'page'}

Tags:
    error-handling, exception-hierarchy, error-context, shadow-terms

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFIG = "CONFIG"
    AUTH = "AUTH"
    STORAGE = "STORAGE"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        post_id: Post the failing operation was about, if any.
        index_category: Index category slug involved, if any.
        operation: Name of the operation that failed.
        metadata: Anything else worth logging.
    """

    post_id: int | None = None
    index_category: str | None = None
    operation: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the populated fields only."""
        result: dict[str, Any] = {}
        if self.post_id is not None:
            result["post_id"] = self.post_id
        if self.index_category is not None:
            result["index_category"] = self.index_category
        if self.operation is not None:
            result["operation"] = self.operation
        result.update(self.metadata)
        return result


class ShadowTermsError(Exception):
    """Base exception for all shadow-terms errors.

    Subclasses set ``default_category`` and ``default_retryable``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ShadowTermsError:
        """Add context to this error (fluent API)."""
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class ValidationError(ShadowTermsError):
    """Input failed validation (bad id, empty title, unknown status)."""

    default_category = ErrorCategory.VALIDATION


class NotFoundError(ShadowTermsError):
    """A post, shadow term or index category does not exist."""

    default_category = ErrorCategory.NOT_FOUND


class ConfigError(ShadowTermsError):
    """Configuration is missing or invalid."""

    default_category = ErrorCategory.CONFIG


class RegistrationError(ConfigError):
    """An index category registration is invalid or conflicting."""


class AuthorizationError(ShadowTermsError):
    """The caller lacks the edit capability."""

    default_category = ErrorCategory.AUTH


class StorageError(ShadowTermsError):
    """The storage collaborator failed."""

    default_category = ErrorCategory.STORAGE
    default_retryable = True


def categorize_error(error: Exception) -> ErrorCategory:
    """Return the category of *error*, ``INTERNAL`` for foreign exceptions."""
    if isinstance(error, ShadowTermsError):
        return error.category
    return ErrorCategory.INTERNAL


__all__ = [
    "AuthorizationError",
    "ConfigError",
    "ErrorCategory",
    "ErrorContext",
    "NotFoundError",
    "RegistrationError",
    "ShadowTermsError",
    "StorageError",
    "ValidationError",
    "categorize_error",
]
