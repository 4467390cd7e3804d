"""
Post operations.

Host-side CRUD for posts.  Every create/update fires ``post.mutated`` and
every hard delete fires ``post.deleted`` through the engine's lifecycle
hooks, so the reconciler keeps the shadow terms in step.

The post write is committed before the hooks run.  If reconciliation
fails its partial writes are rolled back and the failure is reported as a
warning; the post operation itself still succeeds.

Writes hold the post's lock from the first read until the reconciler's
writes are committed, so a concurrent association on the same post sees
either none or all of them.
"""

from __future__ import annotations

from shadowterms.core.errors import NotFoundError, ShadowTermsError, ValidationError
from shadowterms.core.logging import get_logger
from shadowterms.core.models import Post
from shadowterms.core.reconciler import ReconcileOutcome
from shadowterms.ops.context import OperationContext
from shadowterms.ops.engine import ShadowEngine, reconcile_outcome
from shadowterms.ops.requests import CreatePostRequest, ListPostsRequest, UpdatePostRequest
from shadowterms.ops.responses import PostDeleted, PostDetail
from shadowterms.ops.result import OperationResult, PagedResult, start_timer

logger = get_logger(__name__)


def _engine(ctx: OperationContext) -> ShadowEngine:
    return ShadowEngine.for_context(ctx)


def _settle(ctx: OperationContext, outcome: ReconcileOutcome | None) -> list[str]:
    """Commit reconciliation writes, or roll them back if it failed."""
    if outcome is not None and outcome.error:
        ctx.conn.rollback()
        return [f"index reconciliation failed: {outcome.error}"]
    ctx.conn.commit()
    return []


def _action(outcome: ReconcileOutcome | None) -> str | None:
    if outcome is None or not outcome.applied:
        return None
    return outcome.plan.action.value


def _require_post(engine: ShadowEngine, post_id: int, operation: str) -> Post:
    post = engine.posts.get(post_id)
    if post is None:
        raise NotFoundError(f"Post {post_id} not found").with_context(post_id=post_id, operation=operation)
    return post


def _check_status(status: str | None, operation: str) -> None:
    if status is not None and not status.strip():
        raise ValidationError("status must not be empty").with_context(operation=operation, field="status")


def _rejected(exc: ShadowTermsError) -> None:
    logger.warning("op_rejected", error=exc.message, category=exc.category.value, **exc.context.to_dict())


# ------------------------------------------------------------------ #
# Writes
# ------------------------------------------------------------------ #


def create_post(
    ctx: OperationContext,
    request: CreatePostRequest,
) -> OperationResult[PostDetail]:
    """Create a post and reconcile its shadow term."""
    timer = start_timer()

    try:
        if not request.post_type:
            raise ValidationError("post_type is required").with_context(operation="create_post", field="post_type")
        _check_status(request.status, "create_post")

        if ctx.dry_run:
            preview = PostDetail(
                id=0,
                post_type=request.post_type,
                title=request.title,
                slug=request.slug,
                status=request.status,
            )
            return OperationResult.ok(preview, elapsed_ms=timer.elapsed_ms, metadata={"dry_run": True})

        engine = _engine(ctx)
        post = engine.posts.create(request.post_type, request.title, request.status, request.slug)
        ctx.conn.commit()
        logger.info("post.created", post_id=post.id, post_type=post.post_type, status=post.status)

        with ctx.locks.hold(post.id):
            outcome = reconcile_outcome(engine.hooks.fire_mutation(post.id, post, is_update=False))
            warnings = _settle(ctx, outcome)

        return OperationResult.ok(
            engine.describe(post, ctx.visible_status, _action(outcome)),
            warnings=warnings,
            elapsed_ms=timer.elapsed_ms,
        )
    except ShadowTermsError as exc:
        _rejected(exc)
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to create post: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )


def update_post(
    ctx: OperationContext,
    request: UpdatePostRequest,
) -> OperationResult[PostDetail]:
    """Update a post's title, status and/or slug and reconcile its shadow term."""
    timer = start_timer()

    try:
        _check_status(request.status, "update_post")
        engine = _engine(ctx)

        with ctx.locks.hold(request.post_id):
            before = _require_post(engine, request.post_id, "update_post")

            if ctx.dry_run:
                preview = before.evolve(
                    title=before.title if request.title is None else request.title,
                    status=before.status if request.status is None else request.status,
                    slug=before.slug if request.slug is None else request.slug,
                )
                return OperationResult.ok(
                    engine.describe(preview, ctx.visible_status),
                    elapsed_ms=timer.elapsed_ms,
                    metadata={"dry_run": True},
                )

            after = engine.posts.update(
                request.post_id,
                title=request.title,
                status=request.status,
                slug=request.slug,
            )
            if after is None:
                raise NotFoundError(f"Post {request.post_id} not found").with_context(
                    post_id=request.post_id, operation="update_post"
                )
            ctx.conn.commit()
            logger.info(
                "post.updated",
                post_id=after.id,
                status_before=before.status,
                status_after=after.status,
            )

            outcome = reconcile_outcome(engine.hooks.fire_mutation(after.id, after, is_update=True, before=before))
            warnings = _settle(ctx, outcome)

        return OperationResult.ok(
            engine.describe(after, ctx.visible_status, _action(outcome)),
            warnings=warnings,
            elapsed_ms=timer.elapsed_ms,
        )
    except ShadowTermsError as exc:
        _rejected(exc)
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to update post: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )


def delete_post(
    ctx: OperationContext,
    post_id: int,
) -> OperationResult[PostDeleted]:
    """Hard-delete a post.  Its shadow term goes with it, unarchived."""
    timer = start_timer()

    try:
        engine = _engine(ctx)

        with ctx.locks.hold(post_id):
            post = _require_post(engine, post_id, "delete_post")

            if ctx.dry_run:
                return OperationResult.ok(PostDeleted(id=post_id, dry_run=True), elapsed_ms=timer.elapsed_ms)

            engine.posts.delete(post_id)
            ctx.conn.commit()
            logger.info("post.deleted", post_id=post_id, post_type=post.post_type)

            outcome = reconcile_outcome(engine.hooks.fire_delete(post_id, post))
            warnings = _settle(ctx, outcome)

        return OperationResult.ok(
            PostDeleted(id=post_id, index_action=_action(outcome)),
            warnings=warnings,
            elapsed_ms=timer.elapsed_ms,
        )
    except ShadowTermsError as exc:
        _rejected(exc)
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to delete post: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )


# ------------------------------------------------------------------ #
# Reads
# ------------------------------------------------------------------ #


def get_post(
    ctx: OperationContext,
    post_id: int,
) -> OperationResult[PostDetail]:
    """Get a post with its derived index fields."""
    timer = start_timer()

    try:
        engine = _engine(ctx)
        post = _require_post(engine, post_id, "get_post")
        return OperationResult.ok(engine.describe(post, ctx.visible_status), elapsed_ms=timer.elapsed_ms)
    except ShadowTermsError as exc:
        _rejected(exc)
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to get post: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )


def list_posts(
    ctx: OperationContext,
    request: ListPostsRequest | None = None,
) -> PagedResult[PostDetail]:
    """List posts with optional type/status filters."""
    request = request or ListPostsRequest()
    timer = start_timer()

    try:
        engine = _engine(ctx)
        posts, total = engine.posts.list_posts(
            post_type=request.post_type,
            status=request.status,
            limit=request.limit,
            offset=request.offset,
        )
        return PagedResult.from_items(
            [engine.describe(p, ctx.visible_status) for p in posts],
            total=total,
            limit=request.limit,
            offset=request.offset,
            elapsed_ms=timer.elapsed_ms,
        )
    except ShadowTermsError as exc:
        _rejected(exc)
        return PagedResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return PagedResult.fail(
            "INTERNAL",
            f"Failed to list posts: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )
