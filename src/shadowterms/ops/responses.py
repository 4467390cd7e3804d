"""
Typed response objects for operations.

Each dataclass represents the *output* of a single operation beyond the
generic :class:`OperationResult` envelope.  Responses carry only domain
data, never HTTP status codes or CLI formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# ------------------------------------------------------------------ #
# Database responses
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class DatabaseInitResult:
    """Result payload for :func:`shadowterms.ops.database.initialize_database`."""

    tables_created: list[str]
    dry_run: bool = False


# ------------------------------------------------------------------ #
# Post responses
# ------------------------------------------------------------------ #


@dataclass(slots=True)
class PostDetail:
    """A post with its derived index fields.

    Attributes:
        shadow_taxonomy: Index category slug of the post's type (``""`` if none).
        shadow_term_id: Id of the post's live shadow term (``0`` if none).
        associated_posts: Pending / archived relationship targets.
        index_action: What the reconciler did in response to this call.
    """

    id: int
    post_type: str
    title: str
    slug: str
    status: str
    shadow_taxonomy: str = ""
    shadow_term_id: int = 0
    associated_posts: list[int] = field(default_factory=list)
    index_action: str | None = None


@dataclass(frozen=True, slots=True)
class PostDeleted:
    """Result payload for :func:`shadowterms.ops.posts.delete_post`."""

    id: int
    deleted: bool = True
    index_action: str | None = None
    dry_run: bool = False


# ------------------------------------------------------------------ #
# Association responses
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class AssociationResult:
    """Result payload for :func:`shadowterms.ops.associations.associate`.

    Attributes:
        pending: ``True`` when the ids are the source's pending list,
            ``False`` when they are live relationships.
        posts: Pending targets, or posts related to the live term.
        term_id: The live shadow term (``0`` when pending).
    """

    message: str
    posts: list[int]
    pending: bool = False
    term_id: int = 0


# ------------------------------------------------------------------ #
# Index responses
# ------------------------------------------------------------------ #


@dataclass(frozen=True, slots=True)
class IndexCategorySummary:
    """A registered index category."""

    slug: str
    post_type: str
    object_types: list[str]
    label: str = ""
    description: str = ""
    entry_count: int = 0


@dataclass(frozen=True, slots=True)
class IndexEntrySummary:
    """A live shadow term and the post it mirrors (``post_id`` 0 if unresolved)."""

    id: int
    category: str
    name: str
    slug: str
    post_id: int = 0


@dataclass(frozen=True, slots=True)
class RelatedPosts:
    """Posts related to one shadow term."""

    term_id: int
    category: str
    posts: list[int]
