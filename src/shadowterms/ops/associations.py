"""
Association operations.

``associate(source, target)`` relates *target* to the shadow term of
*source*.  What that means depends on the source's current status:

- not visible: the source has no live term, so *target* is appended to the
  source's relationship archive (its pending list) and linked later, when
  the source is published;
- visible: *target* is related to the source's live term immediately and
  the response lists everything currently related to that term.

The source post's lock is held until the write is committed, so two
concurrent associations on one unpublished post both land in its pending
list, and a publish running at the same time restores either list.

A source whose type does not participate is a reportable outcome
(``NOT_PARTICIPATING``), not a fault.
"""

from __future__ import annotations

from shadowterms.core.errors import NotFoundError, ShadowTermsError
from shadowterms.core.logging import get_logger
from shadowterms.core.models import IndexCategory, PostStatus
from shadowterms.ops.context import OperationContext
from shadowterms.ops.engine import ShadowEngine
from shadowterms.ops.requests import AssociateRequest
from shadowterms.ops.responses import AssociationResult
from shadowterms.ops.result import OperationResult, start_timer

logger = get_logger(__name__)

#: Failure codes that are reported to the caller as ``success=false`` rather than as errors.
SOFT_FAILURE_CODES = frozenset({"NOT_PARTICIPATING", "NOT_FOUND"})


def _engine(ctx: OperationContext) -> ShadowEngine:
    return ShadowEngine.for_context(ctx)


def _related_statuses(ctx: OperationContext) -> tuple[str, ...]:
    return (ctx.visible_status, PostStatus.DRAFT.value)


def _connection_warnings(engine: ShadowEngine, category: IndexCategory, target_id: int) -> list[str]:
    if not category.object_types or not target_id:
        return []
    target = engine.posts.get(target_id)
    if target is not None and target.post_type not in category.object_types:
        return [f"post type '{target.post_type}' is not connected to '{category.slug}'"]
    return []


def associate(
    ctx: OperationContext,
    request: AssociateRequest,
) -> OperationResult[AssociationResult]:
    """Relate ``request.target_id`` to the shadow term of ``request.source_id``."""
    timer = start_timer()

    try:
        engine = _engine(ctx)
        with ctx.locks.hold(request.source_id):
            source = engine.posts.get(request.source_id)
            category = engine.addressing.category_for(source) if source is not None else None
            if source is None or category is None:
                return OperationResult.fail(
                    "NOT_PARTICIPATING",
                    "Source post does not have an index category",
                    details={"source_id": request.source_id},
                    elapsed_ms=timer.elapsed_ms,
                )

            warnings = _connection_warnings(engine, category, request.target_id)

            if source.status != ctx.visible_status:
                if ctx.dry_run:
                    pending = engine.archive.read(source, category)
                    if request.target_id and request.target_id not in pending:
                        pending.append(request.target_id)
                else:
                    pending = engine.archive.add(source, request.target_id, category)
                    ctx.conn.commit()
                logger.info(
                    "association.pending",
                    source_id=source.id,
                    target_id=request.target_id,
                    index_category=category.slug,
                    pending=len(pending),
                )
                return OperationResult.ok(
                    AssociationResult(message="Association saved as pending", posts=pending, pending=True),
                    warnings=warnings,
                    elapsed_ms=timer.elapsed_ms,
                )

            term = engine.addressing.term_for(source, category)
            if term is None:
                raise NotFoundError("Source post has no live shadow term").with_context(
                    post_id=source.id, index_category=category.slug, operation="associate"
                )

            if request.target_id and not ctx.dry_run:
                engine.relationships.relate(category.slug, request.target_id, term.id)
                ctx.conn.commit()
                logger.info(
                    "association.created",
                    source_id=source.id,
                    target_id=request.target_id,
                    term_id=term.id,
                    index_category=category.slug,
                )

            related = engine.relationships.objects_for_term(category.slug, term.id)
            posts = engine.posts.filter_by_status(related, _related_statuses(ctx))
        return OperationResult.ok(
            AssociationResult(message="Association created", posts=posts, term_id=term.id),
            warnings=warnings,
            elapsed_ms=timer.elapsed_ms,
        )
    except ShadowTermsError as exc:
        logger.warning("op_rejected", error=exc.message, category=exc.category.value, **exc.context.to_dict())
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to associate posts: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )
