"""
CLI utility helpers: output formatting and context construction.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from shadowterms.core.connection import create_connection
from shadowterms.core.registry import RegistrationSpec, get_registry
from shadowterms.core.settings import ShadowTermsBaseSettings
from shadowterms.ops.context import OperationContext
from shadowterms.ops.result import OperationResult, PagedResult

console = Console()
err_console = Console(stderr=True)

DEFAULT_DATABASE = "shadow_terms.db"

# Reusable option declarations
DatabaseOption = typer.Option(None, "--database", "-d", help="SQLite database path")
RegistryOption = typer.Option(None, "--registry", "-r", help="YAML file declaring index categories")
JsonOption = typer.Option(False, "--json", help="JSON output")


# ── Context helper ───────────────────────────────────────────────────────


def load_registry(path: Path | None) -> None:
    """Load a registration file into the process-wide registry."""
    if path is None:
        return
    try:
        spec = RegistrationSpec.from_yaml_file(path)
    except (OSError, ValueError) as e:
        err_console.print(f"[bold red]Error[/bold red] (CONFIG_INVALID): cannot load registry {path}: {e}")
        raise typer.Exit(code=1) from e
    get_registry().load(spec)


def make_context(
    database: str | None = None,
    registry: Path | None = None,
    *,
    dry_run: bool = False,
) -> tuple[OperationContext, Any]:
    """Create an ``OperationContext`` + connection pair for CLI commands.

    The database defaults to ``<data_dir>/shadow_terms.db`` and its tables
    are created if missing.
    """
    settings = ShadowTermsBaseSettings()
    load_registry(registry or settings.registry_file)
    conn, _info = create_connection(database or DEFAULT_DATABASE, init_schema=True, data_dir=settings.data_dir)
    ctx = OperationContext(
        conn=conn,
        registry=get_registry(),
        visible_status=settings.visible_status,
        caller="cli",
        dry_run=dry_run,
    )
    return ctx, conn


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert dataclass / pydantic model / dict to plain dict."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def _fail(result: OperationResult) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = err.code if err else "ERROR"
    err_console.print(f"[bold red]Error[/bold red] ({code}): {msg}")
    raise typer.Exit(code=1)


def _warn(result: OperationResult) -> None:
    for warning in result.warnings:
        err_console.print(f"[yellow]Warning[/yellow]: {warning}")


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render an ``OperationResult`` to the terminal."""
    if not result.success:
        _fail(result)
    _warn(result)

    data = result.data

    if as_json:
        payload = [_to_dict(d) for d in data] if isinstance(data, list | tuple) else _to_dict(data)
        console.print_json(json.dumps(payload, default=str))
        return

    if isinstance(data, list):
        if not data:
            console.print("[dim]No items.[/dim]")
            return
        _print_table(data, title=title)
    else:
        _print_dict(_to_dict(data), title=title)


def output_paged(
    result: PagedResult,
    *,
    as_json: bool = False,
    title: str = "",
) -> None:
    """Render a ``PagedResult`` to the terminal with pagination info."""
    if not result.success:
        _fail(result)

    items = result.data or []

    if as_json:
        payload = {
            "items": [_to_dict(d) for d in items],
            "total": result.total,
            "limit": result.limit,
            "offset": result.offset,
            "has_more": result.has_more,
        }
        console.print_json(json.dumps(payload, default=str))
        return

    if not items:
        console.print("[dim]No items.[/dim]")
        return

    _print_table(items, title=title)
    console.print(f"\n[dim]Showing {len(items)} of {result.total} (offset {result.offset})[/dim]")


# ── Private helpers ──────────────────────────────────────────────────────


def _print_table(items: list, *, title: str = "") -> None:
    """Render a list of dataclasses/dicts as a Rich table."""
    first = _to_dict(items[0])
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in first:
        table.add_column(col, overflow="fold")
    for item in items:
        table.add_row(*(str(v) for v in _to_dict(item).values()))
    console.print(table)


def _print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
