"""Per-post mutual exclusion.

The relationship archive is read-modify-written both by the reconciler
(on unpublish) and by the association endpoint (pending associations).
On a host that runs requests concurrently, two such writers on the same
post must not interleave.  :class:`EntityLocks` hands out one lock per
post id; callers wrap their read-modify-write *and its commit* in
``with locks.hold(id):`` so the next holder reads committed data.

Locks are reentrant so an operation holding a post's lock may call into
the reconciler and the archive, which take the same lock.  An entry is
dropped when its last holder leaves, so the table only ever contains
posts that are being worked on.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field


@dataclass
class _Entry:
    lock: threading.RLock = field(default_factory=threading.RLock)
    holders: int = 0


class EntityLocks:
    """Reentrant lock per post id, created on first use and dropped after."""

    def __init__(self) -> None:
        self._locks: dict[int, _Entry] = {}
        self._guard = threading.Lock()

    @contextmanager
    def hold(self, post_id: int) -> Iterator[None]:
        """Hold the lock of *post_id* for the duration of the block."""
        with self._guard:
            entry = self._locks.get(post_id)
            if entry is None:
                entry = self._locks[post_id] = _Entry()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[post_id]

    def __contains__(self, post_id: object) -> bool:
        return post_id in self._locks

    def __len__(self) -> int:
        return len(self._locks)


_locks = EntityLocks()


def get_entity_locks() -> EntityLocks:
    """Return the process-wide lock table."""
    return _locks


__all__ = ["EntityLocks", "get_entity_locks"]
