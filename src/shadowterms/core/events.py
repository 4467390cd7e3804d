"""
Post lifecycle events and the hook dispatcher.

The host calls into shadow terms synchronously whenever a post is
written or hard-deleted.  Those calls are modelled as two immutable
events and a small dispatcher:

- :class:`MutationEvent` - fired once per create/update with the post's
  *after* snapshot and, for updates, its *before* snapshot.
- :class:`DeleteEvent` - fired once per hard delete with the snapshot
  taken just before deletion.

:class:`LifecycleHooks` delivers each event to every subscriber.  The
primary mutation has already been committed when hooks run, so a failing
subscriber is logged and skipped; it never propagates to the caller that
fired the event.

Usage::

    hooks = LifecycleHooks()
    hooks.subscribe(POST_MUTATED, reconciler.handle_mutation)
    hooks.subscribe(POST_DELETED, reconciler.handle_delete)

    hooks.dispatch(MutationEvent(post_id=7, after=post, is_update=False))

Tags:
    events, hooks, lifecycle, dispatcher, shadow-terms

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from shadowterms.core.logging import get_logger
from shadowterms.core.models import Post

logger = get_logger(__name__)

POST_MUTATED = "post.mutated"
POST_DELETED = "post.deleted"


@dataclass(frozen=True, slots=True)
class MutationEvent:
    """A post was created (``before is None``) or updated."""

    event_type: ClassVar[str] = POST_MUTATED

    post_id: int
    after: Post
    is_update: bool = False
    before: Post | None = None


@dataclass(frozen=True, slots=True)
class DeleteEvent:
    """A post was hard-deleted; *post* is its last snapshot."""

    event_type: ClassVar[str] = POST_DELETED

    post_id: int
    post: Post


LifecycleEvent = MutationEvent | DeleteEvent
EventHandler = Callable[[Any], Any]


@dataclass
class Subscription:
    """Internal subscription record."""

    id: str
    pattern: str
    handler: EventHandler


def _matches(event_type: str, pattern: str) -> bool:
    if pattern == "*":
        return True
    if pattern.endswith(".*"):
        return event_type.startswith(pattern[:-2] + ".")
    return event_type == pattern


@dataclass
class LifecycleHooks:
    """Synchronous in-process dispatcher for lifecycle events."""

    _subscriptions: dict[str, Subscription] = field(default_factory=dict)

    def subscribe(self, pattern: str, handler: EventHandler) -> str:
        """Subscribe *handler* to events matching *pattern* (``post.*`` ok)."""
        sub_id = f"sub_{uuid.uuid4().hex[:12]}"
        self._subscriptions[sub_id] = Subscription(id=sub_id, pattern=pattern, handler=handler)
        return sub_id

    def unsubscribe(self, subscription_id: str) -> None:
        self._subscriptions.pop(subscription_id, None)

    def dispatch(self, event: LifecycleEvent) -> list[Any]:
        """Deliver *event* to every matching subscriber, in subscription order.

        Returns the values returned by the handlers that succeeded.
        """
        results: list[Any] = []
        for sub in list(self._subscriptions.values()):
            if not _matches(event.event_type, sub.pattern):
                continue
            try:
                results.append(sub.handler(event))
            except Exception as e:
                logger.warning(
                    "hook.handler_failed",
                    subscription_id=sub.id,
                    event_type=event.event_type,
                    post_id=event.post_id,
                    error=str(e),
                )
        return results

    def fire_mutation(self, post_id: int, after: Post, is_update: bool, before: Post | None = None) -> list[Any]:
        """Dispatch a :class:`MutationEvent` (host ``on_mutate``)."""
        return self.dispatch(MutationEvent(post_id=post_id, after=after, is_update=is_update, before=before))

    def fire_delete(self, post_id: int, post: Post) -> list[Any]:
        """Dispatch a :class:`DeleteEvent` (host ``on_delete``)."""
        return self.dispatch(DeleteEvent(post_id=post_id, post=post))

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)


__all__ = [
    "DeleteEvent",
    "EventHandler",
    "LifecycleEvent",
    "LifecycleHooks",
    "MutationEvent",
    "POST_DELETED",
    "POST_MUTATED",
    "Subscription",
]
