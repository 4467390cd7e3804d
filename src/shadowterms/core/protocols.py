"""
Canonical protocol definitions for shadow terms.

This module defines the storage ports the reconciliation core talks to.
The core never reaches for global storage; it is handed objects matching
these shapes.  The SQLite repositories in
:mod:`shadowterms.core.repositories` satisfy them, and so does any test
double with the same methods.

Architecture:
    ::

        protocols.py (YOU ARE HERE)
        ├── Connection         - sync DB-API style connection
        ├── PostStore          - read access to posts
        ├── TermStore          - shadow term CRUD
        ├── RelationshipStore  - term ⇄ object relationships
        └── AttachmentStore    - per-post key/value attachments

    Consumers:
        addressing.py, archive.py, reconciler.py, ops/*

Guardrails:
    ❌ DON'T: Add implementation logic to protocol classes
    ✅ DO: Keep protocols pure contracts - implementations go in repositories

Tags:
    protocol, ports, storage, shadow-terms, contracts

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol, runtime_checkable

from shadowterms.core.models import Post, ShadowTerm

# ---------------------------------------------------------------------------
# Database connection
# ---------------------------------------------------------------------------


@runtime_checkable
class Connection(Protocol):
    """Minimal synchronous connection interface (sqlite3-compatible)."""

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute SQL statement with optional parameters."""
        ...

    def fetchone(self) -> Any:
        """Fetch one row from last query."""
        ...

    def fetchall(self) -> list:
        """Fetch all rows from last query."""
        ...

    def commit(self) -> None:
        """Commit current transaction."""
        ...

    def rollback(self) -> None:
        """Rollback current transaction."""
        ...


# ---------------------------------------------------------------------------
# Storage ports
# ---------------------------------------------------------------------------


@runtime_checkable
class PostStore(Protocol):
    """Read access to the host's posts."""

    def get(self, post_id: int) -> Post | None:
        """Return the current snapshot of a post, or None."""
        ...

    def find_ids_by_title(self, post_type: str, title: str) -> list[int]:
        """Return ids of posts of *post_type* whose title equals *title*."""
        ...

    def filter_by_status(self, post_ids: Iterable[int], statuses: Iterable[str]) -> list[int]:
        """Return the subset of *post_ids* whose status is in *statuses*."""
        ...


@runtime_checkable
class TermStore(Protocol):
    """CRUD for shadow terms.  Deleting a term drops its relationships."""

    def get(self, term_id: int) -> ShadowTerm | None: ...

    def get_by_name(self, category: str, name: str) -> ShadowTerm | None: ...

    def get_by_slug(self, category: str, slug: str) -> ShadowTerm | None: ...

    def get_by_post(self, category: str, post_id: int) -> ShadowTerm | None: ...

    def create(self, category: str, name: str, slug: str, post_id: int | None = None) -> ShadowTerm: ...

    def update(self, term_id: int, *, name: str, slug: str) -> ShadowTerm | None: ...

    def delete(self, term_id: int) -> bool: ...

    def list_terms(self, category: str) -> list[ShadowTerm]: ...


@runtime_checkable
class RelationshipStore(Protocol):
    """Relationships between shadow terms and arbitrary posts."""

    def relate(self, category: str, object_id: int, term_id: int) -> None:
        """Relate *object_id* to *term_id* (idempotent, additive)."""
        ...

    def objects_for_term(self, category: str, term_id: int) -> list[int]:
        """Return ids of objects related to *term_id*."""
        ...

    def terms_for_object(self, category: str, object_id: int) -> list[int]:
        """Return ids of terms *object_id* is related to."""
        ...


@runtime_checkable
class AttachmentStore(Protocol):
    """Per-post key/value attachments (post meta)."""

    def get(self, post_id: int, key: str) -> Any: ...

    def set(self, post_id: int, key: str, value: Any) -> None: ...

    def delete(self, post_id: int, key: str) -> None: ...


__all__ = [
    "AttachmentStore",
    "Connection",
    "PostStore",
    "RelationshipStore",
    "TermStore",
]
