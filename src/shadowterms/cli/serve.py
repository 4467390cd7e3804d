"""
CLI: ``shadow-terms serve``: start the API server.
"""

from __future__ import annotations

import typer
import uvicorn

from shadowterms.cli.utils import console

app = typer.Typer(no_args_is_help=True)


@app.command("start")
def start(
    host: str = typer.Option("0.0.0.0", "--host", "-h", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
    workers: int = typer.Option(1, "--workers", "-w", help="Number of workers"),
    log_level: str = typer.Option("info", "--log-level"),
) -> None:
    """Start the shadow-terms REST API server."""
    console.print(f"[bold green]Starting shadow-terms API[/bold green] on {host}:{port}")
    uvicorn.run(
        "shadowterms.api:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers,
        log_level=log_level,
    )
