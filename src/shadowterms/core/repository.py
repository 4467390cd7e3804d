"""Base repository for SQLite-backed data access.

Provides :class:`BaseRepository`: a thin base class over a
:class:`~shadowterms.core.protocols.Connection` with helpers that return
rows as dicts.

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                       BaseRepository                               │
    │                                                                    │
    │   conn: Connection        ← protocol from shadowterms.core.protocols│
    │                                                                    │
    │   execute(sql, params)     → cursor                                │
    │   query(sql, params)       → list[dict]                            │
    │   query_one(sql, params)   → dict | None                           │
    │   insert(table, data)      → new row id                            │
    └────────────────────────────────────────────────────────────────────┘

Usage:
    >>> class MyRepo(BaseRepository):
    ...     def get_by_id(self, id: int):
    ...         return self.query_one(f"SELECT * FROM my_table WHERE id = {self.ph(1)}", (id,))

Tags:
    repository, database, abstraction
"""

from __future__ import annotations

import sqlite3
from typing import Any

from shadowterms.core.errors import StorageError
from shadowterms.core.protocols import Connection


class BaseRepository:
    """Base class for data-access repositories.

    Parameters:
        conn: Any object satisfying the :class:`Connection` protocol.
    """

    #: Table the subclass mainly works on, reported in storage errors.
    TABLE: str = ""

    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @property
    def table_name(self) -> str:
        return self.TABLE or type(self).__name__

    @staticmethod
    def ph(count: int) -> str:
        """Return *count* comma-separated ``?`` placeholders."""
        return ", ".join("?" for _ in range(count))

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute a statement and return the raw cursor.

        Raises:
            StorageError: The database rejected the statement.
        """
        try:
            return self.conn.execute(sql, params)
        except sqlite3.Error as exc:
            raise StorageError(f"{type(exc).__name__}: {exc}", cause=exc).with_context(
                operation=sql.split(None, 1)[0].upper(),
                table=self.table_name,
            ) from exc

    def query(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        """Execute a SELECT and return rows as dicts."""
        cursor = self.execute(sql, params)
        rows = cursor.fetchall()
        if not rows:
            return []

        try:
            return [dict(row) for row in rows]
        except (TypeError, ValueError):
            pass

        if hasattr(cursor, "description") and cursor.description:
            columns = [desc[0] for desc in cursor.description]
            return [dict(zip(columns, row, strict=False)) for row in rows]

        return [{i: v for i, v in enumerate(row)} for row in rows]

    def query_one(self, sql: str, params: tuple = ()) -> dict[str, Any] | None:
        """Execute a SELECT and return the first row as a dict (or None)."""
        results = self.query(sql, params)
        return results[0] if results else None

    def insert(self, table: str, data: dict[str, Any]) -> int:
        """Insert a single row from a dict; return the new row id."""
        columns = list(data.keys())
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({self.ph(len(columns))})"
        cursor = self.execute(sql, tuple(data.values()))
        return int(getattr(cursor, "lastrowid", 0) or 0)

    def commit(self) -> None:
        """Commit the current transaction."""
        self.conn.commit()


__all__ = ["BaseRepository"]
