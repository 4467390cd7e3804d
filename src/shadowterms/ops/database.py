"""
Database operations.

Thin wrapper around :mod:`shadowterms.core.schema` for table creation.
"""

from __future__ import annotations

from shadowterms.core.logging import get_logger
from shadowterms.core.schema import TABLES, create_tables
from shadowterms.ops.context import OperationContext
from shadowterms.ops.responses import DatabaseInitResult
from shadowterms.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def initialize_database(ctx: OperationContext) -> OperationResult[DatabaseInitResult]:
    """Create all shadow-terms tables (idempotent)."""
    timer = start_timer()

    if ctx.dry_run:
        return OperationResult.ok(
            DatabaseInitResult(tables_created=list(TABLES.values()), dry_run=True),
            elapsed_ms=timer.elapsed_ms,
        )

    try:
        tables = create_tables(ctx.conn)
        logger.info("database.initialized", tables=len(tables))
        return OperationResult.ok(DatabaseInitResult(tables_created=tables), elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to create tables: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )
