"""
Relationship archive.

While a post is not published it has no shadow term, so nothing can be
related to it in the live index.  The archive keeps the ids of posts
related to it in a post attachment named ``<category>_associated_posts``:

- on unpublish, the reconciler overwrites it with the term's relationships;
- while unpublished, the association endpoint appends pending targets;
- on publish, the reconciler re-relates every archived id to the new term.

Stored values are normalised on read: integers, de-duplicated in first-seen
order, falsy values dropped.

Tags:
    archive, post-meta, relationships, shadow-terms

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from shadowterms.core.addressing import Addressing
from shadowterms.core.locks import EntityLocks, get_entity_locks
from shadowterms.core.logging import get_logger
from shadowterms.core.models import IndexCategory, Post
from shadowterms.core.protocols import AttachmentStore

logger = get_logger(__name__)


def normalize_ids(values: Any) -> list[int]:
    """Coerce stored archive content into a de-duplicated list of ints.

    Scalars are treated as one-element lists; values that are not integer
    like, and zeros, are dropped.
    """
    if not values:
        return []
    if isinstance(values, (str, bytes, int)) or not isinstance(values, Iterable):
        values = [values]

    seen: set[int] = set()
    ids: list[int] = []
    for value in values:
        try:
            post_id = int(value)
        except (TypeError, ValueError):
            continue
        if post_id and post_id not in seen:
            seen.add(post_id)
            ids.append(post_id)
    return ids


class RelationshipArchive:
    """Read and write a post's archived relationships."""

    def __init__(
        self,
        addressing: Addressing,
        attachments: AttachmentStore,
        locks: EntityLocks | None = None,
    ) -> None:
        self.addressing = addressing
        self.attachments = attachments
        self.locks = locks or get_entity_locks()

    def _category(self, post: Post, category: IndexCategory | None) -> IndexCategory | None:
        return category or self.addressing.category_for(post)

    def read(self, post: Post, category: IndexCategory | None = None) -> list[int]:
        """Return the archived ids for *post*, ``[]`` if none or unresolved."""
        category = self._category(post, category)
        if category is None:
            return []
        return normalize_ids(self.attachments.get(post.id, category.archive_key))

    def write(self, post: Post, post_ids: Iterable[int], category: IndexCategory | None = None) -> None:
        """Overwrite the archive of *post*; no-op if its category is unresolved."""
        category = self._category(post, category)
        if category is None:
            return
        ids = [int(post_id) for post_id in post_ids]
        self.attachments.set(post.id, category.archive_key, ids)
        logger.debug("archive.written", post_id=post.id, index_category=category.slug, count=len(ids))

    def add(self, post: Post, post_id: int, category: IndexCategory | None = None) -> list[int]:
        """Append *post_id* to the archive unless present; return the new list.

        Zero ids are never stored.
        """
        category = self._category(post, category)
        if category is None:
            return []
        with self.locks.hold(post.id):
            ids = self.read(post, category)
            if post_id and int(post_id) not in ids:
                ids.append(int(post_id))
                self.write(post, ids, category)
        return ids


__all__ = ["RelationshipArchive", "normalize_ids"]
