"""
CLI: ``shadow-terms posts``: create, update, delete and inspect posts.

Every write runs the reconciler, so publishing, unpublishing or renaming a
post from here keeps its shadow term in step.
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


@app.command("create")
def create(
    post_type: str = typer.Argument(..., help="Post type, e.g. 'example'"),
    title: str = typer.Option("", "--title", "-t", help="Post title"),
    status: str = typer.Option("draft", "--status", "-s", help="Post status"),
    slug: str = typer.Option("", "--slug", help="Slug (derived from the title when empty)"),
    database: str | None = DatabaseOption,
    registry: Path | None = RegistryOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without changes"),
    json_out: bool = JsonOption,
) -> None:
    """Create a post."""
    from shadowterms.ops.posts import create_post
    from shadowterms.ops.requests import CreatePostRequest

    ctx, _conn = make_context(database, registry, dry_run=dry_run)
    result = create_post(ctx, CreatePostRequest(post_type=post_type, title=title, status=status, slug=slug))
    output_result(result, as_json=json_out, title="Post")


@app.command("update")
def update(
    post_id: int = typer.Argument(..., help="Post ID"),
    title: str | None = typer.Option(None, "--title", "-t", help="New title"),
    status: str | None = typer.Option(None, "--status", "-s", help="New status"),
    slug: str | None = typer.Option(None, "--slug", help="New slug"),
    database: str | None = DatabaseOption,
    registry: Path | None = RegistryOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without changes"),
    json_out: bool = JsonOption,
) -> None:
    """Update a post's title, status and/or slug."""
    from shadowterms.ops.posts import update_post
    from shadowterms.ops.requests import UpdatePostRequest

    ctx, _conn = make_context(database, registry, dry_run=dry_run)
    result = update_post(ctx, UpdatePostRequest(post_id=post_id, title=title, status=status, slug=slug))
    output_result(result, as_json=json_out, title="Post")


@app.command("delete")
def delete(
    post_id: int = typer.Argument(..., help="Post ID"),
    database: str | None = DatabaseOption,
    registry: Path | None = RegistryOption,
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without changes"),
    json_out: bool = JsonOption,
) -> None:
    """Hard-delete a post (its shadow term is removed without archiving)."""
    from shadowterms.ops.posts import delete_post

    ctx, _conn = make_context(database, registry, dry_run=dry_run)
    result = delete_post(ctx, post_id)
    output_result(result, as_json=json_out, title="Deleted")


@app.command("show")
def show(
    post_id: int = typer.Argument(..., help="Post ID"),
    database: str | None = DatabaseOption,
    registry: Path | None = RegistryOption,
    json_out: bool = JsonOption,
) -> None:
    """Show a post with its shadow taxonomy, term id and pending associations."""
    from shadowterms.ops.posts import get_post

    ctx, _conn = make_context(database, registry)
    result = get_post(ctx, post_id)
    output_result(result, as_json=json_out, title=f"Post {post_id}")


@app.command("list")
def list_(
    post_type: str | None = typer.Option(None, "--type", help="Filter by post type"),
    status: str | None = typer.Option(None, "--status", "-s", help="Filter by status"),
    limit: int = typer.Option(50, "--limit", "-n"),
    offset: int = typer.Option(0, "--offset"),
    database: str | None = DatabaseOption,
    registry: Path | None = RegistryOption,
    json_out: bool = JsonOption,
) -> None:
    """List posts."""
    from shadowterms.ops.posts import list_posts
    from shadowterms.ops.requests import ListPostsRequest

    ctx, _conn = make_context(database, registry)
    result = list_posts(ctx, ListPostsRequest(post_type=post_type, status=status, limit=limit, offset=offset))
    output_paged(result, as_json=json_out, title="Posts")
