"""Tests for ``shadowterms.core.events``: lifecycle hook dispatch."""

from __future__ import annotations

from shadowterms.core.events import POST_DELETED, POST_MUTATED, DeleteEvent, LifecycleHooks, MutationEvent
from shadowterms.core.models import Post

APPLE = Post(1, "example", "Apple", "publish", "apple")


class TestSubscribe:
    def test_exact_pattern(self):
        hooks = LifecycleHooks()
        seen = []
        hooks.subscribe(POST_MUTATED, seen.append)
        hooks.fire_mutation(1, APPLE, is_update=False)
        hooks.fire_delete(1, APPLE)
        assert [type(e) for e in seen] == [MutationEvent]

    def test_wildcards(self):
        hooks = LifecycleHooks()
        prefixed, everything = [], []
        hooks.subscribe("post.*", prefixed.append)
        hooks.subscribe("*", everything.append)
        hooks.fire_mutation(1, APPLE, is_update=False)
        hooks.fire_delete(1, APPLE)
        assert len(prefixed) == 2
        assert len(everything) == 2

    def test_unsubscribe(self):
        hooks = LifecycleHooks()
        sub_id = hooks.subscribe(POST_DELETED, lambda e: None)
        assert hooks.subscription_count == 1
        hooks.unsubscribe(sub_id)
        hooks.unsubscribe(sub_id)
        assert hooks.subscription_count == 0


class TestDispatch:
    def test_returns_handler_values_in_order(self):
        hooks = LifecycleHooks()
        hooks.subscribe(POST_MUTATED, lambda e: "first")
        hooks.subscribe(POST_MUTATED, lambda e: "second")
        assert hooks.fire_mutation(1, APPLE, is_update=False) == ["first", "second"]

    def test_failing_handler_is_skipped(self):
        hooks = LifecycleHooks()

        def boom(event):
            raise RuntimeError("boom")

        hooks.subscribe(POST_DELETED, boom)
        hooks.subscribe(POST_DELETED, lambda e: e.post.slug)
        assert hooks.fire_delete(1, APPLE) == ["apple"]

    def test_event_payloads(self):
        hooks = LifecycleHooks()
        seen = []
        hooks.subscribe("*", seen.append)
        before = APPLE.evolve(status="draft")
        hooks.fire_mutation(1, APPLE, is_update=True, before=before)
        hooks.fire_delete(1, APPLE)

        mutation, deletion = seen
        assert mutation.event_type == POST_MUTATED
        assert mutation.before == before
        assert mutation.after == APPLE
        assert mutation.is_update is True
        assert isinstance(deletion, DeleteEvent)
        assert deletion.event_type == POST_DELETED
