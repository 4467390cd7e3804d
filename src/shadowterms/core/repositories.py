"""Repositories for the shadow-terms tables.

Each repository extends :class:`BaseRepository` and satisfies one of the
storage ports in :mod:`shadowterms.core.protocols`.  The reconciler and
the ops layer only ever talk to these through the port shapes, so a host
with its own storage can swap them out.

Architecture::

    ┌───────────────────────────────────────────────────────────────────┐
    │  ops/posts.py,  ops/associations.py,  ops/index.py                │
    │  core/reconciler.py, core/archive.py, core/addressing.py          │
    └──────────────────────────┬────────────────────────────────────────┘
                               │ uses (via ports)
                               ▼
    ┌───────────────────────────────────────────────────────────────────┐
    │  repositories.py                                                  │
    │                                                                   │
    │  PostRepository          - st_posts              (PostStore)      │
    │  TermRepository          - st_terms              (TermStore)      │
    │  RelationshipRepository  - st_term_relationships (Relationship…)  │
    │  AttachmentRepository    - st_post_attachments   (AttachmentStore)│
    └──────────────────────────┬────────────────────────────────────────┘
                               │ inherits
                               ▼
    ┌───────────────────────────────────────────────────────────────────┐
    │  BaseRepository  (shadowterms.core.repository)                    │
    └───────────────────────────────────────────────────────────────────┘

Repositories never commit; the calling operation owns the transaction.

Guardrails:
    ❌ DON'T: Write raw SQL in ops modules
    ✅ DO: Use the appropriate repository class

Tags:
    repository, sql, sqlite, shadow-terms, ports
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from shadowterms.core.models import Post, PostStatus, ShadowTerm
from shadowterms.core.repository import BaseRepository
from shadowterms.core.schema import TABLES
from shadowterms.core.slugs import slugify, unique_slug


def _row_to_post(row: dict[str, Any]) -> Post:
    return Post(
        id=int(row["id"]),
        post_type=row["post_type"],
        title=row["title"] or "",
        status=row["status"],
        slug=row["slug"] or "",
    )


def _row_to_term(row: dict[str, Any]) -> ShadowTerm:
    post_id = row.get("post_id")
    return ShadowTerm(
        id=int(row["id"]),
        category=row["category"],
        name=row["name"],
        slug=row["slug"],
        post_id=int(post_id) if post_id is not None else None,
    )


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


class PostRepository(BaseRepository):
    """Host post storage.  Implements :class:`PostStore` plus CRUD."""

    TABLE = TABLES["posts"]

    # -- PostStore -------------------------------------------------------------

    def get(self, post_id: int) -> Post | None:
        row = self.query_one(f"SELECT * FROM {self.TABLE} WHERE id = {self.ph(1)}", (post_id,))
        return _row_to_post(row) if row else None

    def find_ids_by_title(self, post_type: str, title: str) -> list[int]:
        rows = self.query(
            f"SELECT id FROM {self.TABLE} WHERE post_type = {self.ph(1)} AND title = {self.ph(1)} ORDER BY id",
            (post_type, title),
        )
        return [int(r["id"]) for r in rows]

    def filter_by_status(self, post_ids: Iterable[int], statuses: Iterable[str]) -> list[int]:
        ids = [int(i) for i in post_ids]
        wanted = list(statuses)
        if not ids or not wanted:
            return []
        rows = self.query(
            f"SELECT id FROM {self.TABLE} WHERE id IN ({self.ph(len(ids))}) AND status IN ({self.ph(len(wanted))})",
            (*ids, *wanted),
        )
        found = {int(r["id"]) for r in rows}
        return [i for i in ids if i in found]

    # -- CRUD ------------------------------------------------------------------

    def slug_taken(self, post_type: str, slug: str, *, exclude_id: int | None = None) -> bool:
        row = self.query_one(
            f"SELECT id FROM {self.TABLE} WHERE post_type = {self.ph(1)} AND slug = {self.ph(1)}",
            (post_type, slug),
        )
        return row is not None and int(row["id"]) != exclude_id

    def _unique_slug(self, post_type: str, base: str, exclude_id: int | None = None) -> str:
        if not base:
            return ""
        return unique_slug(base, lambda s: self.slug_taken(post_type, s, exclude_id=exclude_id))

    def create(
        self,
        post_type: str,
        title: str = "",
        status: str = PostStatus.DRAFT.value,
        slug: str = "",
    ) -> Post:
        """Insert a post.  The slug defaults to the slugified title, made unique per type."""
        slug = self._unique_slug(post_type, slugify(slug) if slug else slugify(title))
        post_id = self.insert(
            self.TABLE,
            {"post_type": post_type, "title": title, "status": status, "slug": slug},
        )
        return Post(id=post_id, post_type=post_type, title=title, status=status, slug=slug)

    def update(
        self,
        post_id: int,
        *,
        title: str | None = None,
        status: str | None = None,
        slug: str | None = None,
    ) -> Post | None:
        """Apply the given changes; return the new snapshot (None if missing).

        Changing the title keeps the slug unless a slug is given.  An empty
        slug on a post that never had one is filled from the title.
        """
        current = self.get(post_id)
        if current is None:
            return None

        new_title = current.title if title is None else title
        new_status = current.status if status is None else status
        if slug is not None:
            new_slug = self._unique_slug(current.post_type, slugify(slug), exclude_id=post_id)
        elif not current.slug:
            new_slug = self._unique_slug(current.post_type, slugify(new_title), exclude_id=post_id)
        else:
            new_slug = current.slug

        self.execute(
            f"UPDATE {self.TABLE} SET title = {self.ph(1)}, status = {self.ph(1)}, slug = {self.ph(1)}, "
            f"updated_at = datetime('now') WHERE id = {self.ph(1)}",
            (new_title, new_status, new_slug, post_id),
        )
        return current.evolve(title=new_title, status=new_status, slug=new_slug)

    def delete(self, post_id: int) -> bool:
        """Hard-delete a post with its attachments and its own relationships."""
        cursor = self.execute(f"DELETE FROM {self.TABLE} WHERE id = {self.ph(1)}", (post_id,))
        deleted = getattr(cursor, "rowcount", 0) > 0
        if deleted:
            self.execute(f"DELETE FROM {TABLES['attachments']} WHERE post_id = {self.ph(1)}", (post_id,))
            self.execute(f"DELETE FROM {TABLES['relationships']} WHERE object_id = {self.ph(1)}", (post_id,))
        return deleted

    def list_posts(
        self,
        *,
        post_type: str | None = None,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Post], int]:
        """List posts.  Returns ``(posts, total)``."""
        conds: list[str] = []
        params: list[Any] = []
        if post_type:
            conds.append(f"post_type = {self.ph(1)}")
            params.append(post_type)
        if status:
            conds.append(f"status = {self.ph(1)}")
            params.append(status)
        where = " AND ".join(conds) or "1=1"

        count_row = self.query_one(f"SELECT COUNT(*) AS cnt FROM {self.TABLE} WHERE {where}", tuple(params))
        total = (count_row or {}).get("cnt", 0)

        rows = self.query(
            f"SELECT * FROM {self.TABLE} WHERE {where} ORDER BY id LIMIT {self.ph(1)} OFFSET {self.ph(1)}",
            (*params, limit, offset),
        )
        return [_row_to_post(r) for r in rows], total


# ---------------------------------------------------------------------------
# Shadow terms
# ---------------------------------------------------------------------------


class TermRepository(BaseRepository):
    """Shadow term storage.  Implements :class:`TermStore`."""

    TABLE = TABLES["terms"]

    def _one(self, where: str, params: tuple) -> ShadowTerm | None:
        row = self.query_one(f"SELECT * FROM {self.TABLE} WHERE {where} ORDER BY id LIMIT 1", params)
        return _row_to_term(row) if row else None

    def get(self, term_id: int) -> ShadowTerm | None:
        return self._one(f"id = {self.ph(1)}", (term_id,))

    def get_by_name(self, category: str, name: str) -> ShadowTerm | None:
        return self._one(f"category = {self.ph(1)} AND name = {self.ph(1)}", (category, name))

    def get_by_slug(self, category: str, slug: str) -> ShadowTerm | None:
        return self._one(f"category = {self.ph(1)} AND slug = {self.ph(1)}", (category, slug))

    def get_by_post(self, category: str, post_id: int) -> ShadowTerm | None:
        return self._one(f"category = {self.ph(1)} AND post_id = {self.ph(1)}", (category, post_id))

    def _unique_slug(self, category: str, base: str, exclude_id: int | None = None) -> str:
        def taken(slug: str) -> bool:
            term = self.get_by_slug(category, slug)
            return term is not None and term.id != exclude_id

        return unique_slug(base, taken)

    def create(self, category: str, name: str, slug: str, post_id: int | None = None) -> ShadowTerm:
        """Insert a term; the slug is suffixed ``-2``, ``-3`` ... if taken."""
        slug = self._unique_slug(category, slug or slugify(name) or "term")
        term_id = self.insert(
            self.TABLE,
            {"category": category, "name": name, "slug": slug, "post_id": post_id},
        )
        return ShadowTerm(id=term_id, category=category, name=name, slug=slug, post_id=post_id)

    def update(self, term_id: int, *, name: str, slug: str) -> ShadowTerm | None:
        current = self.get(term_id)
        if current is None:
            return None
        slug = self._unique_slug(current.category, slug or slugify(name) or "term", exclude_id=term_id)
        self.execute(
            f"UPDATE {self.TABLE} SET name = {self.ph(1)}, slug = {self.ph(1)} WHERE id = {self.ph(1)}",
            (name, slug, term_id),
        )
        return ShadowTerm(id=term_id, category=current.category, name=name, slug=slug, post_id=current.post_id)

    def delete(self, term_id: int) -> bool:
        """Delete a term and every relationship pointing at it."""
        self.execute(f"DELETE FROM {TABLES['relationships']} WHERE term_id = {self.ph(1)}", (term_id,))
        cursor = self.execute(f"DELETE FROM {self.TABLE} WHERE id = {self.ph(1)}", (term_id,))
        return getattr(cursor, "rowcount", 0) > 0

    def list_terms(self, category: str) -> list[ShadowTerm]:
        rows = self.query(
            f"SELECT * FROM {self.TABLE} WHERE category = {self.ph(1)} ORDER BY name, id",
            (category,),
        )
        return [_row_to_term(r) for r in rows]


# ---------------------------------------------------------------------------
# Relationships
# ---------------------------------------------------------------------------


class RelationshipRepository(BaseRepository):
    """Term ⇄ object links.  Implements :class:`RelationshipStore`."""

    TABLE = TABLES["relationships"]

    def relate(self, category: str, object_id: int, term_id: int) -> None:
        self.execute(
            f"INSERT OR IGNORE INTO {self.TABLE} (category, term_id, object_id) VALUES ({self.ph(3)})",
            (category, term_id, object_id),
        )

    def objects_for_term(self, category: str, term_id: int) -> list[int]:
        rows = self.query(
            f"SELECT object_id FROM {self.TABLE} WHERE category = {self.ph(1)} AND term_id = {self.ph(1)} "
            f"ORDER BY rowid",
            (category, term_id),
        )
        return [int(r["object_id"]) for r in rows]

    def terms_for_object(self, category: str, object_id: int) -> list[int]:
        rows = self.query(
            f"SELECT term_id FROM {self.TABLE} WHERE category = {self.ph(1)} AND object_id = {self.ph(1)} "
            f"ORDER BY rowid",
            (category, object_id),
        )
        return [int(r["term_id"]) for r in rows]


# ---------------------------------------------------------------------------
# Attachments
# ---------------------------------------------------------------------------


class AttachmentRepository(BaseRepository):
    """Per-post key/value storage with JSON values.  Implements :class:`AttachmentStore`."""

    TABLE = TABLES["attachments"]

    def get(self, post_id: int, key: str) -> Any:
        row = self.query_one(
            f"SELECT meta_value FROM {self.TABLE} WHERE post_id = {self.ph(1)} AND meta_key = {self.ph(1)}",
            (post_id, key),
        )
        if row is None or row["meta_value"] is None:
            return None
        try:
            return json.loads(row["meta_value"])
        except json.JSONDecodeError:
            return row["meta_value"]

    def set(self, post_id: int, key: str, value: Any) -> None:
        self.execute(
            f"INSERT OR REPLACE INTO {self.TABLE} (post_id, meta_key, meta_value) VALUES ({self.ph(3)})",
            (post_id, key, json.dumps(value)),
        )

    def delete(self, post_id: int, key: str) -> None:
        self.execute(
            f"DELETE FROM {self.TABLE} WHERE post_id = {self.ph(1)} AND meta_key = {self.ph(1)}",
            (post_id, key),
        )


__all__ = [
    "AttachmentRepository",
    "PostRepository",
    "RelationshipRepository",
    "TermRepository",
]
