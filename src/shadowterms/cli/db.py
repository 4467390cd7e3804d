"""
CLI: ``shadow-terms db``: database management commands.
"""

from __future__ import annotations

import typer

from shadowterms.cli.utils import DatabaseOption, JsonOption, make_context, output_result

app = typer.Typer(no_args_is_help=True)


@app.command()
def init(
    database: str | None = DatabaseOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without changes"),
    json_out: bool = JsonOption,
) -> None:
    """Initialise database schema (create tables)."""
    from shadowterms.ops.database import initialize_database

    ctx, _conn = make_context(database, dry_run=dry_run)
    result = initialize_database(ctx)
    output_result(result, as_json=json_out, title="Database Init")
