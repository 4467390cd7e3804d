"""
Domain models for shadow terms.

Three immutable value types flow through every layer:

- :class:`Post` - a snapshot of a primary content item at one instant.
  Lifecycle events carry a *before* and an *after* snapshot.
- :class:`IndexCategory` - the descriptor of the index ("shadow
  taxonomy") that mirrors one post type.
- :class:`ShadowTerm` - a live index entry standing in for a visible post.

Manifesto:
    Snapshots are frozen so a handler can never mutate the event it is
    reacting to.  Reconciliation compares two snapshots; it never reads
    the "current" post from storage while deciding what to do.

Architecture:
    ::

        Post (id, post_type, title, slug, status)
          │  post_type + "_connect"
          ▼
        IndexCategory (slug, post_type, object_types)
          │  one live entry per visible post
          ▼
        ShadowTerm (id, category, name == title, slug == post slug, post_id)

Tags:
    models, dataclasses, snapshot, shadow-term, index-category

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

#: Suffix appended to a post type to build its default index category slug.
INDEX_CATEGORY_SUFFIX = "_connect"

#: Attachment key suffix for the relationship archive.
ARCHIVE_KEY_SUFFIX = "_associated_posts"


class PostStatus(str, Enum):
    """Well-known post statuses.

    The host may define others; statuses are compared as plain strings and
    only :attr:`PUBLISH` is distinguished (see :func:`is_visible`).
    """

    PUBLISH = "publish"
    DRAFT = "draft"
    PENDING = "pending"
    PRIVATE = "private"
    FUTURE = "future"
    TRASH = "trash"


VISIBLE_STATUS = PostStatus.PUBLISH.value

#: Statuses reported by the association endpoint's related-post query.
RELATED_POST_STATUSES: tuple[str, ...] = (PostStatus.PUBLISH.value, PostStatus.DRAFT.value)


def is_visible(status: str | None, visible_status: str = VISIBLE_STATUS) -> bool:
    """Return True when *status* is the distinguished visible status."""
    return status == visible_status


@dataclass(frozen=True, slots=True)
class Post:
    """Immutable snapshot of a post.

    Attributes:
        id: Opaque integer identity (0 for a snapshot not yet stored).
        post_type: Category of the post, e.g. ``"example"``.
        title: Human label; mirrored as the shadow term name.
        status: Host status string, e.g. ``"publish"`` or ``"draft"``.
        slug: URL-safe label; mirrored as the shadow term slug.
    """

    id: int
    post_type: str
    title: str = ""
    status: str = PostStatus.DRAFT.value
    slug: str = ""

    def evolve(self, **changes: object) -> Post:
        """Return a copy with *changes* applied."""
        return replace(self, **changes)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class IndexCategory:
    """Descriptor of the index category that mirrors one post type.

    Attributes:
        slug: Index category identifier, ``<post_type>_connect`` by default.
        post_type: The post type whose published posts it mirrors.
        object_types: Post types allowed to be related to its entries.
        label: Display label, copied from the post type.
        description: Free-form description, copied from the post type.
    """

    slug: str
    post_type: str
    object_types: tuple[str, ...] = ()
    label: str = ""
    description: str = ""

    @property
    def archive_key(self) -> str:
        """Attachment key holding the relationship archive for this category."""
        return f"{self.slug}{ARCHIVE_KEY_SUFFIX}"


@dataclass(frozen=True, slots=True)
class ShadowTerm:
    """A live index entry.

    ``post_id`` is the explicit link back to the mirrored post.  Rows
    created before the link existed carry ``None`` and are matched by
    name instead.
    """

    id: int
    category: str
    name: str
    slug: str
    post_id: int | None = None


__all__ = [
    "ARCHIVE_KEY_SUFFIX",
    "INDEX_CATEGORY_SUFFIX",
    "IndexCategory",
    "Post",
    "PostStatus",
    "RELATED_POST_STATUSES",
    "ShadowTerm",
    "VISIBLE_STATUS",
    "is_visible",
]
