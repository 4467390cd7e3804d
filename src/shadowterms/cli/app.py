"""
Root Typer application for the shadow-terms CLI.
"""

from __future__ import annotations

from pathlib import Path

import typer
from typer import Typer

from shadowterms.cli.utils import DatabaseOption, JsonOption, RegistryOption, make_context, output_result
from shadowterms.core.logging import configure_logging

app = Typer(
    name="shadow-terms",
    help="shadow-terms - keep a shadow index entry in step with every published post.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from shadowterms import __version__

        typer.echo(f"shadow-terms {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str = typer.Option("WARNING", "--log-level", help="Log level (logs go to stderr)"),
) -> None:
    """shadow-terms CLI: manage posts, associations and the shadow index."""
    configure_logging(level=log_level, service="shadow-terms-cli")


@app.command("associate")
def associate(
    source: str = typer.Argument(..., help="Source post ID"),
    target: str = typer.Argument(..., help="Target post ID"),
    database: str | None = DatabaseOption,
    registry: Path | None = RegistryOption,
    json_out: bool = JsonOption,
) -> None:
    """Relate TARGET to the shadow term of SOURCE (pending while SOURCE is unpublished)."""
    from shadowterms.ops.associations import associate as _associate
    from shadowterms.ops.requests import AssociateRequest

    ctx, _conn = make_context(database, registry)
    result = _associate(ctx, AssociateRequest.from_raw(source, target))
    output_result(result, as_json=json_out, title="Association")


# ── Sub-command registration ─────────────────────────────────────────────

from shadowterms.cli.db import app as db_app  # noqa: E402
from shadowterms.cli.posts import app as posts_app  # noqa: E402
from shadowterms.cli.serve import app as serve_app  # noqa: E402
from shadowterms.cli.terms import app as terms_app  # noqa: E402

app.add_typer(db_app, name="db", help="Database operations.")
app.add_typer(posts_app, name="posts", help="Post management.")
app.add_typer(terms_app, name="terms", help="Index categories and shadow terms.")
app.add_typer(serve_app, name="serve", help="Start the API server.")
