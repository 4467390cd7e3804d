"""
CLI: ``shadow-terms terms``: inspect index categories and shadow terms.
"""

from __future__ import annotations

from pathlib import Path

import typer

from shadowterms.cli.utils import (
    DatabaseOption,
    JsonOption,
    RegistryOption,
    make_context,
    output_paged,
    output_result,
)

app = typer.Typer(no_args_is_help=True)


@app.command("categories")
def categories(
    database: str | None = DatabaseOption,
    registry: Path | None = RegistryOption,
    json_out: bool = JsonOption,
) -> None:
    """List registered index categories."""
    from shadowterms.ops.index import list_index_categories

    ctx, _conn = make_context(database, registry)
    output_result(list_index_categories(ctx), as_json=json_out, title="Index Categories")


@app.command("list")
def list_(
    category: str = typer.Argument(..., help="Index category slug, e.g. 'example_connect'"),
    limit: int = typer.Option(50, "--limit", "-n"),
    offset: int = typer.Option(0, "--offset"),
    database: str | None = DatabaseOption,
    registry: Path | None = RegistryOption,
    json_out: bool = JsonOption,
) -> None:
    """List the live shadow terms of an index category."""
    from shadowterms.ops.index import list_index_entries
    from shadowterms.ops.requests import ListIndexEntriesRequest

    ctx, _conn = make_context(database, registry)
    result = list_index_entries(ctx, ListIndexEntriesRequest(category=category, limit=limit, offset=offset))
    output_paged(result, as_json=json_out, title=category)


@app.command("related")
def related(
    term_id: int = typer.Argument(..., help="Shadow term ID"),
    database: str | None = DatabaseOption,
    registry: Path | None = RegistryOption,
    json_out: bool = JsonOption,
) -> None:
    """List posts related to a shadow term."""
    from shadowterms.ops.index import list_related_posts

    ctx, _conn = make_context(database, registry)
    output_result(list_related_posts(ctx, term_id), as_json=json_out, title=f"Shadow term {term_id}")
