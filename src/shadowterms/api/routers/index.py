"""
Index router: read-only views over index categories and shadow terms.

Endpoints:
    GET /index-categories                     List registered index categories
    GET /index-categories/{slug}/entries      List live shadow terms of a category
    GET /index-entries/{id}/post              The post a shadow term mirrors
    GET /index-entries/{id}/related           Posts related to a shadow term
"""

from __future__ import annotations

from fastapi import APIRouter, Path, Query, Request

from shadowterms.api.deps import OpContext
from shadowterms.api.schemas.common import PagedResponse, PageMeta, SuccessResponse
from shadowterms.api.schemas.posts import IndexCategorySchema, IndexEntrySchema, PostSchema
from shadowterms.api.utils import _dc, _handle_error

router = APIRouter()


@router.get("/index-categories", response_model=SuccessResponse[list[IndexCategorySchema]])
def list_index_categories(ctx: OpContext):
    """List registered index categories with their live entry counts."""
    from shadowterms.ops.index import list_index_categories as _list

    result = _list(ctx)

    if not result.success:
        return _handle_error(result)

    return SuccessResponse(data=[_dc(c) for c in (result.data or [])], elapsed_ms=result.elapsed_ms)


@router.get("/index-categories/{slug}/entries", response_model=PagedResponse[IndexEntrySchema])
def list_index_entries(
    ctx: OpContext,
    request: Request,
    slug: str = Path(..., description="Index category slug"),
    limit: int = Query(50, ge=1, le=500, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
):
    """List the live shadow terms of an index category."""
    from shadowterms.ops.index import list_index_entries as _list
    from shadowterms.ops.requests import ListIndexEntriesRequest

    result = _list(ctx, ListIndexEntriesRequest(category=slug, limit=limit, offset=offset))

    if not result.success:
        return _handle_error(result, instance=str(request.url))

    return {
        "data": [_dc(e) for e in (result.data or [])],
        "meta": PageMeta(
            total=result.total,
            limit=result.limit,
            offset=result.offset,
            has_more=result.has_more,
        ).model_dump(),
        "elapsed_ms": result.elapsed_ms,
    }


@router.get("/index-entries/{term_id}/post", response_model=SuccessResponse[PostSchema])
def get_entry_post(ctx: OpContext, request: Request, term_id: int = Path(..., description="Shadow term ID")):
    """Resolve a shadow term back to the post it mirrors."""
    from shadowterms.ops.index import get_entry_post as _get

    result = _get(ctx, term_id)

    if not result.success:
        return _handle_error(result, instance=str(request.url))

    return SuccessResponse(data=_dc(result.data), elapsed_ms=result.elapsed_ms)


@router.get("/index-entries/{term_id}/related")
def list_related_posts(ctx: OpContext, request: Request, term_id: int = Path(..., description="Shadow term ID")):
    """List every post related to a shadow term."""
    from shadowterms.ops.index import list_related_posts as _list

    result = _list(ctx, term_id)

    if not result.success:
        return _handle_error(result, instance=str(request.url))

    return SuccessResponse(data=_dc(result.data), elapsed_ms=result.elapsed_ms)
