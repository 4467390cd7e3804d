"""
Typed request objects for operations.

Each dataclass represents the *input* contract for a single operation
function.  Requests carry only transport-agnostic data, never raw HTTP
bodies, no Typer params.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from shadowterms.core.models import PostStatus


def coerce_id(value: Any) -> int:
    """Coerce a loosely-typed id to ``int``; anything unparseable is ``0``."""
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


# ------------------------------------------------------------------ #
# Post operations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class CreatePostRequest:
    """Request for :func:`shadowterms.ops.posts.create_post`."""

    post_type: str
    title: str = ""
    status: str = PostStatus.DRAFT.value
    slug: str = ""


@dataclass(frozen=True, slots=True)
class UpdatePostRequest:
    """Request for :func:`shadowterms.ops.posts.update_post`.

    ``None`` fields are left unchanged.
    """

    post_id: int
    title: str | None = None
    status: str | None = None
    slug: str | None = None


@dataclass(frozen=True, slots=True)
class ListPostsRequest:
    """Request for :func:`shadowterms.ops.posts.list_posts`."""

    post_type: str | None = None
    status: str | None = None
    limit: int = 50
    offset: int = 0


# ------------------------------------------------------------------ #
# Associations
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class AssociateRequest:
    """Request for :func:`shadowterms.ops.associations.associate`.

    Attributes:
        source_id: The post whose shadow term the target is related to.
        target_id: The post being related.
    """

    source_id: int
    target_id: int

    @classmethod
    def from_raw(cls, source_id: Any, target_id: Any) -> AssociateRequest:
        """Build a request from untyped input, coercing bad ids to ``0``."""
        return cls(source_id=coerce_id(source_id), target_id=coerce_id(target_id))


# ------------------------------------------------------------------ #
# Index reads
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class ListIndexEntriesRequest:
    """Request for :func:`shadowterms.ops.index.list_index_entries`."""

    category: str
    limit: int = 50
    offset: int = 0
