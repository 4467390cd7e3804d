"""
Index read operations.

Read-only views over the registered index categories, their live shadow
terms, and the relationships pointing at a term.  Nothing here writes;
shadow terms are only ever created or removed by the reconciler.
"""

from __future__ import annotations

from shadowterms.core.errors import NotFoundError, ShadowTermsError
from shadowterms.core.logging import get_logger
from shadowterms.core.models import ShadowTerm
from shadowterms.ops.context import OperationContext
from shadowterms.ops.engine import ShadowEngine
from shadowterms.ops.requests import ListIndexEntriesRequest
from shadowterms.ops.responses import IndexCategorySummary, IndexEntrySummary, PostDetail, RelatedPosts
from shadowterms.ops.result import OperationResult, PagedResult, start_timer

logger = get_logger(__name__)


def _engine(ctx: OperationContext) -> ShadowEngine:
    return ShadowEngine.for_context(ctx)


def _require_term(engine: ShadowEngine, term_id: int, operation: str) -> ShadowTerm:
    term = engine.terms.get(term_id)
    if term is None:
        raise NotFoundError(f"Shadow term {term_id} not found").with_context(term_id=term_id, operation=operation)
    return term


def _rejected(exc: ShadowTermsError) -> None:
    logger.warning("op_rejected", error=exc.message, category=exc.category.value, **exc.context.to_dict())


def list_index_categories(ctx: OperationContext) -> OperationResult[list[IndexCategorySummary]]:
    """List registered index categories with their live entry counts."""
    timer = start_timer()

    try:
        engine = _engine(ctx)
        summaries = [
            IndexCategorySummary(
                slug=category.slug,
                post_type=category.post_type,
                object_types=list(category.object_types),
                label=category.label,
                description=category.description,
                entry_count=len(engine.terms.list_terms(category.slug)),
            )
            for category in ctx.registry.categories()
        ]
        return OperationResult.ok(summaries, elapsed_ms=timer.elapsed_ms)
    except ShadowTermsError as exc:
        _rejected(exc)
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to list index categories: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )


def list_index_entries(
    ctx: OperationContext,
    request: ListIndexEntriesRequest,
) -> PagedResult[IndexEntrySummary]:
    """List the live shadow terms of one index category."""
    timer = start_timer()

    try:
        if not ctx.registry.exists(request.category):
            raise NotFoundError(f"Index category '{request.category}' is not registered").with_context(
                index_category=request.category, operation="list_index_entries"
            )

        engine = _engine(ctx)
        terms = engine.terms.list_terms(request.category)
        page = terms[request.offset : request.offset + request.limit]
        entries = []
        for term in page:
            post = engine.addressing.indexed_post_for(term)
            entries.append(
                IndexEntrySummary(
                    id=term.id,
                    category=term.category,
                    name=term.name,
                    slug=term.slug,
                    post_id=post.id if post else 0,
                )
            )
        return PagedResult.from_items(
            entries,
            total=len(terms),
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
            f"Failed to list index entries: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )


def get_entry_post(
    ctx: OperationContext,
    term_id: int,
) -> OperationResult[PostDetail]:
    """Return the post a shadow term mirrors.

    ``NOT_FOUND`` when the term does not exist, or when the inverse lookup
    is absent or ambiguous.
    """
    timer = start_timer()

    try:
        engine = _engine(ctx)
        term = _require_term(engine, term_id, "get_entry_post")

        post = engine.addressing.indexed_post_for(term)
        if post is None:
            raise NotFoundError(f"No single post is indexed by shadow term {term_id}").with_context(
                index_category=term.category, name=term.name, operation="get_entry_post"
            )
        return OperationResult.ok(engine.describe(post, ctx.visible_status), elapsed_ms=timer.elapsed_ms)
    except ShadowTermsError as exc:
        _rejected(exc)
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to resolve shadow term: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )


def list_related_posts(
    ctx: OperationContext,
    term_id: int,
) -> OperationResult[RelatedPosts]:
    """List every post related to a shadow term."""
    timer = start_timer()

    try:
        engine = _engine(ctx)
        term = _require_term(engine, term_id, "list_related_posts")

        posts = engine.relationships.objects_for_term(term.category, term.id)
        return OperationResult.ok(
            RelatedPosts(term_id=term.id, category=term.category, posts=posts),
            elapsed_ms=timer.elapsed_ms,
        )
    except ShadowTermsError as exc:
        _rejected(exc)
        return OperationResult.from_exception(exc, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "INTERNAL",
            f"Failed to list related posts: {exc}",
            elapsed_ms=timer.elapsed_ms,
        )
