"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument.  The context carries the database connection, the index category
registry, optional extra lifecycle subscribers, the per-post lock table,
caller identity, dry-run flag, and arbitrary metadata.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from shadowterms.core.events import LifecycleHooks
from shadowterms.core.locks import EntityLocks, get_entity_locks
from shadowterms.core.models import VISIBLE_STATUS
from shadowterms.core.protocols import Connection
from shadowterms.core.registry import IndexCategoryRegistry, get_registry


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        conn: Database connection satisfying :class:`shadowterms.core.protocols.Connection`.
        registry: Index category registry (the process-wide one by default).
        hooks: Extra lifecycle subscribers notified after the reconciler.
        locks: Per-post lock table shared by the archive and the reconciler.
        visible_status: The status that keeps a shadow term alive.
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request - ``"api"``, ``"cli"`` or ``"sdk"``.
        user: Optional authenticated user identifier.
        dry_run: When ``True``, operations return a preview without side effects.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    conn: Connection
    registry: IndexCategoryRegistry = field(default_factory=get_registry)
    hooks: LifecycleHooks | None = None
    locks: EntityLocks = field(default_factory=get_entity_locks)
    visible_status: str = VISIBLE_STATUS
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    user: str | None = None
    dry_run: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
