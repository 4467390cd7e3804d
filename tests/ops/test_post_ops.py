"""
Tests for ``shadowterms.ops.posts``.

Tests verify:
- Publishing creates exactly one shadow term named and slugged like the post
- Renaming a published post keeps the term's identity
- Unpublishing archives relationships; republishing restores them
- Hard delete removes the term without writing the archive
- A reconciliation failure never fails the post write
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from shadowterms.core.events import POST_DELETED, POST_MUTATED, LifecycleHooks
from shadowterms.core.repositories import AttachmentRepository, RelationshipRepository, TermRepository
from shadowterms.ops.posts import create_post, delete_post, get_post, list_posts, update_post
from shadowterms.ops.requests import CreatePostRequest, ListPostsRequest, UpdatePostRequest

ARCHIVE_KEY = "example_connect_associated_posts"


def _create(ctx, title, status="publish", post_type="example", **kw):
    result = create_post(ctx, CreatePostRequest(post_type=post_type, title=title, status=status, **kw))
    assert result.success, result.error
    return result.data


def _update(ctx, post_id, **changes):
    result = update_post(ctx, UpdatePostRequest(post_id=post_id, **changes))
    assert result.success, result.error
    return result.data


class TestCreatePost:
    def test_apple_published(self, ctx, conn):
        detail = _create(ctx, "Apple")
        assert detail.shadow_taxonomy == "example_connect"
        assert detail.shadow_term_id > 0
        assert detail.index_action == "create"

        term = TermRepository(conn).get(detail.shadow_term_id)
        assert (term.category, term.name, term.slug) == ("example_connect", "Apple", "apple")

    def test_exactly_one_term(self, ctx, conn):
        _create(ctx, "Apple")
        assert len(TermRepository(conn).list_terms("example_connect")) == 1

    def test_draft_has_no_term(self, ctx, conn):
        detail = _create(ctx, "Apple", status="draft")
        assert detail.shadow_term_id == 0
        assert detail.index_action is None
        assert TermRepository(conn).list_terms("example_connect") == []

    def test_not_participating(self, ctx):
        detail = _create(ctx, "Apple", post_type="unexample")
        assert detail.shadow_taxonomy == ""
        assert detail.shadow_term_id == 0

    def test_duplicate_title_does_not_duplicate_term(self, ctx, conn):
        first = _create(ctx, "Apple")
        second = _create(ctx, "Apple")
        assert second.slug == "apple-2"
        assert second.index_action is None
        assert second.shadow_term_id == 0
        terms = TermRepository(conn).list_terms("example_connect")
        assert [t.id for t in terms] == [first.shadow_term_id]

    def test_validation(self, ctx):
        result = create_post(ctx, CreatePostRequest(post_type="", title="Apple"))
        assert result.success is False
        assert result.error.code == "VALIDATION_FAILED"

        result = create_post(ctx, CreatePostRequest(post_type="example", title="Apple", status="  "))
        assert result.error.code == "VALIDATION_FAILED"
        assert result.error.details == {"operation": "create_post", "field": "status"}

    def test_dry_run_writes_nothing(self, ctx, conn):
        ctx.dry_run = True
        result = create_post(ctx, CreatePostRequest(post_type="example", title="Apple", status="publish"))
        assert result.success is True
        assert result.metadata == {"dry_run": True}
        assert result.data.id == 0
        assert conn.execute("SELECT COUNT(*) AS n FROM st_posts").fetchone()["n"] == 0


class TestUpdatePost:
    def test_rename_keeps_term_id(self, ctx, conn):
        created = _create(ctx, "Apple")
        renamed = _update(ctx, created.id, title="Apples")

        assert renamed.index_action == "rename"
        assert renamed.shadow_term_id == created.shadow_term_id
        term = TermRepository(conn).get(created.shadow_term_id)
        assert (term.name, term.slug) == ("Apples", "apple")

    def test_slug_change(self, ctx, conn):
        created = _create(ctx, "Garbanzo Bean")
        updated = _update(ctx, created.id, slug="chickpea")
        assert updated.shadow_term_id == created.shadow_term_id
        assert TermRepository(conn).get(created.shadow_term_id).slug == "chickpea"

    def test_title_and_slug_change(self, ctx, conn):
        created = _create(ctx, "Garbanzo Bean")
        updated = _update(ctx, created.id, title="Chickpea", slug="chickpea")
        term = TermRepository(conn).get(updated.shadow_term_id)
        assert (term.id, term.name, term.slug) == (created.shadow_term_id, "Chickpea", "chickpea")

    def test_unpublish_archives(self, ctx, conn):
        zebra = _create(ctx, "Zebra")
        yellow = _create(ctx, "Yellow", post_type="another-example")
        fry = _create(ctx, "French Fry", post_type="another-example")
        relationships = RelationshipRepository(conn)
        relationships.relate("example_connect", yellow.id, zebra.shadow_term_id)
        relationships.relate("example_connect", fry.id, zebra.shadow_term_id)
        conn.commit()

        drafted = _update(ctx, zebra.id, status="draft")

        assert drafted.index_action == "archive_and_delete"
        assert drafted.shadow_term_id == 0
        assert drafted.associated_posts == [yellow.id, fry.id]
        assert TermRepository(conn).get(zebra.shadow_term_id) is None
        assert AttachmentRepository(conn).get(zebra.id, ARCHIVE_KEY) == [yellow.id, fry.id]

    @pytest.mark.parametrize("status", ["draft", "pending", "private", "trash"])
    def test_republish_restores(self, ctx, conn, status):
        zebra = _create(ctx, "Zebra")
        yellow = _create(ctx, "Yellow", post_type="another-example")
        RelationshipRepository(conn).relate("example_connect", yellow.id, zebra.shadow_term_id)
        conn.commit()

        _update(ctx, zebra.id, status=status)
        restored = _update(ctx, zebra.id, status="publish")

        assert restored.index_action == "create"
        assert restored.shadow_term_id not in (0, zebra.shadow_term_id)
        assert RelationshipRepository(conn).objects_for_term("example_connect", restored.shadow_term_id) == [
            yellow.id
        ]

    def test_draft_to_publish_creates(self, ctx):
        draft = _create(ctx, "Apple", status="draft")
        published = _update(ctx, draft.id, status="publish")
        assert published.index_action == "create"
        assert published.shadow_term_id > 0

    def test_edit_while_unpublished_then_publish(self, ctx, conn):
        draft = _create(ctx, "Garbanzo Bean", status="draft")
        _update(ctx, draft.id, title="Chickpea", slug="chickpea")
        published = _update(ctx, draft.id, status="publish")
        term = TermRepository(conn).get(published.shadow_term_id)
        assert (term.name, term.slug) == ("Chickpea", "chickpea")

    def test_not_found(self, ctx):
        result = update_post(ctx, UpdatePostRequest(post_id=999, title="x"))
        assert result.success is False
        assert result.error.code == "NOT_FOUND"
        assert result.error.details == {"post_id": 999, "operation": "update_post"}

    def test_dry_run_preview(self, ctx, conn):
        created = _create(ctx, "Apple")
        ctx.dry_run = True
        result = update_post(ctx, UpdatePostRequest(post_id=created.id, title="Apples"))
        assert result.data.title == "Apples"
        assert TermRepository(conn).get(created.shadow_term_id).name == "Apple"

    def test_reconcile_failure_is_a_warning(self, ctx, conn):
        with patch("shadowterms.core.reconciler.Reconciler.apply", side_effect=RuntimeError("boom")):
            result = create_post(ctx, CreatePostRequest(post_type="example", title="Apple", status="publish"))

        assert result.success is True
        assert result.warnings == ["index reconciliation failed: boom"]
        assert result.data.shadow_term_id == 0
        assert get_post(ctx, result.data.id).success is True

    def test_storage_failure_is_retryable_internal(self, registry):
        from shadowterms.core.connection import create_connection
        from shadowterms.core.errors import ErrorCategory
        from shadowterms.ops.context import OperationContext

        bare, _info = create_connection()
        try:
            result = get_post(OperationContext(conn=bare, registry=registry), 1)
        finally:
            bare.close()

        assert result.success is False
        assert result.error.code == "INTERNAL"
        assert result.error.category is ErrorCategory.STORAGE
        assert result.error.retryable is True
        assert result.error.details["table"] == "st_posts"

    def test_extra_hooks_receive_events(self, conn, registry):
        from shadowterms.core.locks import EntityLocks
        from shadowterms.ops.context import OperationContext

        hooks = LifecycleHooks()
        seen: list[str] = []
        hooks.subscribe("post.*", lambda e: seen.append(e.event_type))
        ctx = OperationContext(conn=conn, registry=registry, hooks=hooks, locks=EntityLocks())

        created = _create(ctx, "Apple")
        _update(ctx, created.id, title="Apples")
        delete_post(ctx, created.id)

        assert seen == [POST_MUTATED, POST_MUTATED, POST_DELETED]


class TestDeletePost:
    def test_apple_delete(self, ctx, conn):
        created = _create(ctx, "Apple")
        _update(ctx, created.id, title="Apples")

        result = delete_post(ctx, created.id)

        assert result.success is True
        assert result.data.index_action == "delete"
        assert TermRepository(conn).get(created.shadow_term_id) is None
        assert get_post(ctx, created.id).error.code == "NOT_FOUND"

    def test_delete_does_not_archive(self, ctx, conn):
        created = _create(ctx, "Apple")
        other = _create(ctx, "Yellow", post_type="another-example")
        RelationshipRepository(conn).relate("example_connect", other.id, created.shadow_term_id)
        conn.commit()

        delete_post(ctx, created.id)

        row = conn.execute(
            "SELECT COUNT(*) AS n FROM st_post_attachments WHERE meta_key = ?", (ARCHIVE_KEY,)
        ).fetchone()
        assert row["n"] == 0
        assert RelationshipRepository(conn).objects_for_term("example_connect", created.shadow_term_id) == []

    def test_delete_draft(self, ctx):
        draft = _create(ctx, "Apple", status="draft")
        result = delete_post(ctx, draft.id)
        assert result.success is True
        assert result.data.index_action is None

    def test_not_found(self, ctx):
        assert delete_post(ctx, 999).error.code == "NOT_FOUND"

    def test_dry_run(self, ctx, conn):
        created = _create(ctx, "Apple")
        ctx.dry_run = True
        result = delete_post(ctx, created.id)
        assert result.data.dry_run is True
        assert TermRepository(conn).get(created.shadow_term_id) is not None


class TestReads:
    def test_get_post_derived_fields(self, ctx):
        created = _create(ctx, "Apple")
        detail = get_post(ctx, created.id).data
        assert detail.shadow_taxonomy == "example_connect"
        assert detail.shadow_term_id == created.shadow_term_id
        assert detail.associated_posts == []
        assert detail.index_action is None

    def test_list_posts(self, ctx):
        for title in ("A", "B", "C"):
            _create(ctx, title, status="draft")
        _create(ctx, "D", post_type="unexample")

        page = list_posts(ctx, ListPostsRequest(post_type="example", limit=2))
        assert page.success is True
        assert page.total == 3
        assert page.has_more is True
        assert [p.title for p in page.data] == ["A", "B"]

        everything = list_posts(ctx)
        assert everything.total == 4


class TestCustomVisibleStatus:
    def test_live_status_drives_terms(self, conn, registry):
        from shadowterms.core.locks import EntityLocks
        from shadowterms.ops.context import OperationContext

        ctx = OperationContext(conn=conn, registry=registry, locks=EntityLocks(), visible_status="live")

        published = _create(ctx, "Apple", status="publish")
        assert published.shadow_term_id == 0

        live = _update(ctx, published.id, status="live")
        assert live.index_action == "create"
        assert live.shadow_term_id > 0
