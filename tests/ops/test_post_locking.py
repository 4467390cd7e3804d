"""
Per-post locking across connections.

Each test opens several connections to one SQLite file, the way
concurrent API requests do, and keeps the first writer inside its
transaction until the second one has had the chance to interleave.
"""

from __future__ import annotations

import threading

import pytest

from shadowterms.core.connection import create_connection
from shadowterms.core.events import POST_MUTATED, LifecycleHooks
from shadowterms.core.locks import EntityLocks
from shadowterms.core.repositories import RelationshipRepository
from shadowterms.ops.associations import associate
from shadowterms.ops.context import OperationContext
from shadowterms.ops.posts import create_post, get_post, update_post
from shadowterms.ops.requests import AssociateRequest, CreatePostRequest, UpdatePostRequest


class HeldCommit:
    """Connection wrapper whose ``commit`` waits until released."""

    def __init__(self, conn):
        self._conn = conn
        self.committing = threading.Event()
        self.release = threading.Event()

    def __getattr__(self, name):
        return getattr(self._conn, name)

    def commit(self):
        self.committing.set()
        self.release.wait(timeout=5)
        self._conn.commit()


@pytest.fixture
def db_path(tmp_path) -> str:
    path = str(tmp_path / "shadow.db")
    conn, _info = create_connection(path, init_schema=True)
    conn.close()
    return path


@pytest.fixture
def open_ctx(db_path, registry):
    """Open a new connection to the shared file; every context shares one lock table."""
    locks = EntityLocks()
    opened = []

    def make(*, hooks=None, wrap=None) -> OperationContext:
        conn, _info = create_connection(db_path)
        opened.append(conn)
        return OperationContext(conn=wrap(conn) if wrap else conn, registry=registry, hooks=hooks, locks=locks)

    yield make
    for conn in opened:
        conn.close()


def _draft(ctx, title="Elm"):
    result = create_post(ctx, CreatePostRequest(post_type="example", title=title, status="draft"))
    assert result.success, result.error
    return result.data


class TestConcurrentPendingAssociations:
    def test_second_writer_waits_for_first_commit(self, open_ctx):
        setup = open_ctx()
        source = _draft(setup)

        held = None

        def hold(conn):
            nonlocal held
            held = HeldCommit(conn)
            return held

        first = open_ctx(wrap=hold)
        second = open_ctx()
        results = {}

        def run(name, ctx, target_id):
            results[name] = associate(ctx, AssociateRequest(source_id=source.id, target_id=target_id))

        a = threading.Thread(target=run, args=("a", first, 101))
        b = threading.Thread(target=run, args=("b", second, 102))

        a.start()
        assert held.committing.wait(timeout=5)
        b.start()
        b.join(timeout=0.2)
        assert b.is_alive()

        held.release.set()
        a.join(timeout=5)
        b.join(timeout=5)

        assert results["a"].success and results["b"].success
        assert results["b"].data.posts == [101, 102]
        assert get_post(setup, source.id).data.associated_posts == [101, 102]

    def test_lock_table_empty_afterwards(self, open_ctx):
        ctx = open_ctx()
        source = _draft(ctx)
        associate(ctx, AssociateRequest(source_id=source.id, target_id=5))
        assert len(ctx.locks) == 0


class TestPublishDuringAssociation:
    def test_association_waits_for_publish_to_commit(self, open_ctx):
        setup = open_ctx()
        source = _draft(setup)
        associate(setup, AssociateRequest(source_id=source.id, target_id=101))

        second = open_ctx()
        seen = {}

        def during_reconcile(event):
            worker = threading.Thread(
                target=lambda: seen.setdefault(
                    "result", associate(second, AssociateRequest(source_id=source.id, target_id=102))
                )
            )
            worker.start()
            worker.join(timeout=0.2)
            seen["blocked"] = worker.is_alive()
            seen["worker"] = worker

        hooks = LifecycleHooks()
        hooks.subscribe(POST_MUTATED, during_reconcile)
        first = open_ctx(hooks=hooks)

        published = update_post(first, UpdatePostRequest(post_id=source.id, status="publish"))
        seen["worker"].join(timeout=5)

        assert published.success
        assert seen["blocked"] is True
        assert seen["result"].success
        assert seen["result"].data.pending is False

        related = RelationshipRepository(setup.conn).objects_for_term(
            "example_connect", published.data.shadow_term_id
        )
        assert sorted(related) == [101, 102]
