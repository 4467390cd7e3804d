"""Shadow Terms Core -- the reconciliation engine and its storage ports.

Manifesto:
    A published post gets exactly one live index entry (a "shadow term")
    in its post type's index category.  Unpublishing archives whatever was
    related to that entry so publishing again can restore it.  Everything
    in ``shadowterms.core`` is synchronous and talks to storage only
    through the ports in :mod:`shadowterms.core.protocols`.

Architecture::

    Layer 1 -- Types & Errors
        models.py          Post, IndexCategory, ShadowTerm snapshots
        errors.py          ShadowTermsError hierarchy
        protocols.py       Storage ports (PostStore, TermStore, ...)

    Layer 2 -- Storage (SQLite)
        schema.py          DDL + create_tables()
        connection.py      create_connection()
        repository.py      BaseRepository helpers
        repositories.py    Post/Term/Relationship/Attachment repositories

    Layer 3 -- Reconciliation
        registry.py        Index category registry (+ YAML loader)
        addressing.py      post ⇄ category ⇄ term lookups
        archive.py         Relationship archive (post attachment)
        locks.py           Per-post locks
        events.py          Lifecycle events + hook dispatcher
        reconciler.py      The rule table

    Cross-cutting
        logging.py         structlog configuration
        settings.py        pydantic-settings base
        slugs.py           slugify / unique_slug
"""

from shadowterms.core.addressing import Addressing
from shadowterms.core.archive import RelationshipArchive, normalize_ids
from shadowterms.core.connection import ConnectionInfo, SqliteConnection, create_connection
from shadowterms.core.errors import (
    AuthorizationError,
    ConfigError,
    ErrorCategory,
    NotFoundError,
    RegistrationError,
    ShadowTermsError,
    StorageError,
    ValidationError,
)
from shadowterms.core.events import DeleteEvent, LifecycleHooks, MutationEvent
from shadowterms.core.locks import EntityLocks, get_entity_locks
from shadowterms.core.models import (
    ARCHIVE_KEY_SUFFIX,
    INDEX_CATEGORY_SUFFIX,
    VISIBLE_STATUS,
    IndexCategory,
    Post,
    PostStatus,
    ShadowTerm,
)
from shadowterms.core.reconciler import ReconcileAction, ReconcileOutcome, ReconcilePlan, Reconciler
from shadowterms.core.registry import IndexCategoryRegistry, RegistrationSpec, clear_registry, get_registry

__all__ = [
    "ARCHIVE_KEY_SUFFIX",
    "Addressing",
    "AuthorizationError",
    "ConfigError",
    "ConnectionInfo",
    "DeleteEvent",
    "EntityLocks",
    "ErrorCategory",
    "INDEX_CATEGORY_SUFFIX",
    "IndexCategory",
    "IndexCategoryRegistry",
    "LifecycleHooks",
    "MutationEvent",
    "NotFoundError",
    "Post",
    "PostStatus",
    "ReconcileAction",
    "ReconcileOutcome",
    "ReconcilePlan",
    "Reconciler",
    "RegistrationError",
    "RegistrationSpec",
    "RelationshipArchive",
    "ShadowTerm",
    "ShadowTermsError",
    "SqliteConnection",
    "StorageError",
    "VISIBLE_STATUS",
    "ValidationError",
    "clear_registry",
    "create_connection",
    "get_entity_locks",
    "get_registry",
    "normalize_ids",
]
