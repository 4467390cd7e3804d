"""
Tables backing the SQLite storage ports.

Defines table names and idempotent DDL for posts, shadow terms, term
relationships and post attachments.

Architecture:
    ::

        Table Registry (TABLES):
        ┌────────────────────────────────────────────────────────────┐
        │ posts          → st_posts                                  │
        │ terms          → st_terms          UNIQUE(category, slug)  │
        │ relationships  → st_term_relationships                     │
        │                  PK(category, term_id, object_id)          │
        │ attachments    → st_post_attachments                       │
        │                  PK(post_id, meta_key), JSON value         │
        └────────────────────────────────────────────────────────────┘

Examples:
    >>> from shadowterms.core.schema import TABLES, create_tables
    >>> TABLES["terms"]
    'st_terms'
    >>> create_tables(conn)

Tags:
    schema, ddl, sqlite, shadow-terms

Doc-Types:
    - Schema Documentation
"""

from __future__ import annotations

from typing import Any

TABLES = {
    "posts": "st_posts",
    "terms": "st_terms",
    "relationships": "st_term_relationships",
    "attachments": "st_post_attachments",
}


DDL = {
    "posts": """
        CREATE TABLE IF NOT EXISTS st_posts (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            post_type TEXT NOT NULL,
            title TEXT NOT NULL DEFAULT '',
            slug TEXT NOT NULL DEFAULT '',
            status TEXT NOT NULL DEFAULT 'draft',
            created_at TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        );
        CREATE INDEX IF NOT EXISTS idx_st_posts_type_title ON st_posts(post_type, title);
        CREATE INDEX IF NOT EXISTS idx_st_posts_type_slug ON st_posts(post_type, slug);
    """,
    # One live term per (category, slug).  post_id links the term back to the
    # post it mirrors; NULL for rows that predate the link.
    "terms": """
        CREATE TABLE IF NOT EXISTS st_terms (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            category TEXT NOT NULL,
            name TEXT NOT NULL,
            slug TEXT NOT NULL,
            post_id INTEGER,
            UNIQUE (category, slug)
        );
        CREATE INDEX IF NOT EXISTS idx_st_terms_category_name ON st_terms(category, name);
        CREATE INDEX IF NOT EXISTS idx_st_terms_post ON st_terms(category, post_id);
    """,
    "relationships": """
        CREATE TABLE IF NOT EXISTS st_term_relationships (
            category TEXT NOT NULL,
            term_id INTEGER NOT NULL,
            object_id INTEGER NOT NULL,
            PRIMARY KEY (category, term_id, object_id)
        );
        CREATE INDEX IF NOT EXISTS idx_st_rel_object ON st_term_relationships(category, object_id);
    """,
    "attachments": """
        CREATE TABLE IF NOT EXISTS st_post_attachments (
            post_id INTEGER NOT NULL,
            meta_key TEXT NOT NULL,
            meta_value TEXT,
            PRIMARY KEY (post_id, meta_key)
        );
    """,
}


def create_tables(conn: Any) -> list[str]:
    """Create all tables (idempotent).  Returns the table names applied."""
    applied: list[str] = []
    for name, ddl in DDL.items():
        for statement in ddl.split(";"):
            if statement.strip():
                conn.execute(statement)
        applied.append(TABLES[name])
    conn.commit()
    return applied


__all__ = ["DDL", "TABLES", "create_tables"]
