"""
Shared pytest fixtures for shadow-terms tests.

This module provides:
- A process-wide registry reset with the standard post types
- An in-memory SQLite connection with the shadow-terms tables
- An ``OperationContext`` bound to that connection
- Small helpers for creating posts through the ops layer
"""

from collections.abc import Generator

import pytest

from shadowterms.core.connection import SqliteConnection, create_connection
from shadowterms.core.locks import EntityLocks
from shadowterms.core.registry import IndexCategoryRegistry, clear_registry, get_registry
from shadowterms.ops.context import OperationContext

# =============================================================================
# Registry
# =============================================================================


def register_standard_types(registry: IndexCategoryRegistry) -> None:
    """``example`` and ``another-example`` participate; ``unexample`` does not."""
    registry.register("example", connected=["post", "another-example"])
    registry.register("another-example", connected=["post", "example"])
    registry.declare_support("draft-only", connected=["post"])


@pytest.fixture(autouse=True)
def registry() -> Generator[IndexCategoryRegistry, None, None]:
    """Reset the process-wide registry around every test."""
    clear_registry()
    reg = get_registry()
    register_standard_types(reg)
    yield reg
    clear_registry()


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def conn() -> Generator[SqliteConnection, None, None]:
    """In-memory SQLite connection with all tables created."""
    connection, _info = create_connection(init_schema=True)
    yield connection
    connection.close()


@pytest.fixture
def ctx(conn: SqliteConnection, registry: IndexCategoryRegistry) -> OperationContext:
    """Operation context over the in-memory connection."""
    return OperationContext(conn=conn, registry=registry, locks=EntityLocks())
