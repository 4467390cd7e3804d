"""
CLI layer for shadow-terms.

Provides a Typer application with sub-commands that delegate to the
operations layer (``shadowterms.ops``).  All business logic lives in ops;
this package handles argument parsing and Rich output only.

Entry point::

    shadow-terms --help
"""

from shadowterms.cli.app import app

__all__ = ["app"]
