"""
Connection factory: one function to get a database connection.

Usage::

    from shadowterms.core.connection import create_connection

    # In-memory (tests, demos)
    conn, info = create_connection()

    # Persistent SQLite file, tables created if missing
    conn, info = create_connection("shadow_terms.db", init_schema=True)

    print(info)
    # ConnectionInfo(backend='sqlite', persistent=True, path='/.../shadow_terms.db')

``create_connection()`` returns ``(conn, ConnectionInfo)`` where ``conn``
satisfies the :class:`~shadowterms.core.protocols.Connection` protocol.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from shadowterms.core.logging import get_logger

logger = get_logger(__name__)


class SqliteConnection:
    """Adapter: ``sqlite3.Connection`` → ``Connection`` protocol.

    Maintains a single cursor so that ``execute`` / ``fetchone`` /
    ``fetchall`` operate on the same result set.
    """

    def __init__(self, path: str = ":memory:", *, row_factory: Any = sqlite3.Row) -> None:
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = row_factory
        self._cursor = self._conn.cursor()

    # -- Connection protocol -----------------------------------------------

    def execute(self, sql: str, params: tuple = ()) -> Any:
        self._cursor.execute(sql, params)
        return self._cursor

    def fetchone(self) -> Any:
        return self._cursor.fetchone()

    def fetchall(self) -> list:
        return self._cursor.fetchall()

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()

    @property
    def raw(self) -> sqlite3.Connection:
        """Access the underlying ``sqlite3.Connection`` (e.g. for pragmas)."""
        return self._conn

    def __repr__(self) -> str:
        return f"SqliteConnection({self._conn!r})"


@dataclass(frozen=True)
class ConnectionInfo:
    """Metadata about a database connection."""

    backend: str
    """Backend identifier, always ``"sqlite"`` today."""

    persistent: bool
    """Whether data survives process exit."""

    url: str
    """The original URL or path used to create the connection."""

    resolved_path: str | None = None
    """For file-based SQLite, the resolved absolute path."""

    def __repr__(self) -> str:
        parts = [f"backend={self.backend!r}", f"persistent={self.persistent}"]
        if self.resolved_path:
            parts.append(f"path={self.resolved_path!r}")
        else:
            parts.append(f"url={self.url!r}")
        return f"ConnectionInfo({', '.join(parts)})"


def _parse_url(db: str | None) -> tuple[str, str]:
    """Parse a database URL into ``(scheme, target)``.

    scheme is ``"memory"`` or ``"sqlite"``.
    """
    if db is None or db in ("", "memory", ":memory:"):
        return "memory", ":memory:"

    for prefix in ("sqlite:///", "sqlite://"):
        if db.startswith(prefix):
            path = db[len(prefix):]
            if not path or path == ":memory:":
                return "memory", ":memory:"
            return "sqlite", path

    if "://" in db:
        logger.warning("connection.unsupported_scheme", url=db)
        return "memory", ":memory:"

    return "sqlite", db


def create_connection(
    db: str | None = None,
    *,
    init_schema: bool = False,
    data_dir: str | Path | None = None,
) -> tuple[SqliteConnection, ConnectionInfo]:
    """Create a database connection from a URL, path, or keyword.

    Parameters
    ----------
    db:
        ``None`` / ``"memory"`` for in-memory SQLite, a file path, or a
        ``sqlite:///path`` URL.  Other schemes fall back to in-memory.
    init_schema:
        If ``True``, create the shadow-terms tables (idempotent).
    data_dir:
        Directory used to resolve relative file paths.
    """
    scheme, target = _parse_url(db)

    if scheme == "memory":
        conn = SqliteConnection(":memory:")
        info = ConnectionInfo(backend="sqlite", persistent=False, url=":memory:")
    else:
        path = Path(target).expanduser()
        if data_dir and not path.is_absolute():
            path = Path(data_dir).expanduser() / path
        path.parent.mkdir(parents=True, exist_ok=True)
        resolved = str(path.resolve())
        conn = SqliteConnection(resolved)
        info = ConnectionInfo(backend="sqlite", persistent=True, url=target, resolved_path=resolved)

    if init_schema:
        from shadowterms.core.schema import create_tables

        create_tables(conn)

    return conn, info


__all__ = ["ConnectionInfo", "SqliteConnection", "create_connection"]
