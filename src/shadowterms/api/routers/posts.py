"""
Posts router: host-side post CRUD.

Endpoints:
    GET    /posts          List posts
    POST   /posts          Create a post
    GET    /posts/{id}     Get a post with its derived index fields
    PATCH  /posts/{id}     Update title / status / slug
    DELETE /posts/{id}     Hard-delete a post

Every write runs the reconciler; responses report what it did in
``index_action``.  Writes require the edit capability.
"""

from __future__ import annotations

from fastapi import APIRouter, Path, Query, Request

from shadowterms.api.deps import EditCapability, OpContext
from shadowterms.api.schemas.common import PagedResponse, PageMeta, SuccessResponse
from shadowterms.api.schemas.posts import PostCreateRequest, PostSchema, PostUpdateRequest
from shadowterms.api.utils import _dc, _handle_error

router = APIRouter(prefix="/posts")


@router.get("", response_model=PagedResponse[PostSchema])
def list_posts(
    ctx: OpContext,
    post_type: str | None = Query(None, description="Filter by post type"),
    status: str | None = Query(None, description="Filter by status"),
    limit: int = Query(50, ge=1, le=500, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
):
    """List posts."""
    from shadowterms.ops.posts import list_posts as _list
    from shadowterms.ops.requests import ListPostsRequest

    result = _list(ctx, ListPostsRequest(post_type=post_type, status=status, limit=limit, offset=offset))

    if not result.success:
        return _handle_error(result)

    return {
        "data": [_dc(p) for p in (result.data or [])],
        "meta": PageMeta(
            total=result.total,
            limit=result.limit,
            offset=result.offset,
            has_more=result.has_more,
        ).model_dump(),
        "elapsed_ms": result.elapsed_ms,
    }


@router.post("", status_code=201, response_model=SuccessResponse[PostSchema], dependencies=[EditCapability])
def create_post(ctx: OpContext, body: PostCreateRequest, request: Request):
    """Create a post.  Publishing it creates its shadow term."""
    from shadowterms.ops.posts import create_post as _create
    from shadowterms.ops.requests import CreatePostRequest

    result = _create(
        ctx,
        CreatePostRequest(post_type=body.post_type, title=body.title, status=body.status, slug=body.slug),
    )

    if not result.success:
        return _handle_error(result, instance=str(request.url))

    return SuccessResponse(data=_dc(result.data), elapsed_ms=result.elapsed_ms, warnings=result.warnings)


@router.get("/{post_id}", response_model=SuccessResponse[PostSchema])
def get_post(ctx: OpContext, request: Request, post_id: int = Path(..., description="Post ID")):
    """Get a post with its shadow taxonomy, shadow term id and pending associations."""
    from shadowterms.ops.posts import get_post as _get

    result = _get(ctx, post_id)

    if not result.success:
        return _handle_error(result, instance=str(request.url))

    return SuccessResponse(data=_dc(result.data), elapsed_ms=result.elapsed_ms)


@router.patch("/{post_id}", response_model=SuccessResponse[PostSchema], dependencies=[EditCapability])
def update_post(
    ctx: OpContext,
    body: PostUpdateRequest,
    request: Request,
    post_id: int = Path(..., description="Post ID"),
):
    """Update a post.  Status and title changes are reconciled with its shadow term."""
    from shadowterms.ops.posts import update_post as _update
    from shadowterms.ops.requests import UpdatePostRequest

    result = _update(
        ctx,
        UpdatePostRequest(post_id=post_id, title=body.title, status=body.status, slug=body.slug),
    )

    if not result.success:
        return _handle_error(result, instance=str(request.url))

    return SuccessResponse(data=_dc(result.data), elapsed_ms=result.elapsed_ms, warnings=result.warnings)


@router.delete("/{post_id}", dependencies=[EditCapability])
def delete_post(ctx: OpContext, request: Request, post_id: int = Path(..., description="Post ID")):
    """Hard-delete a post.  Its shadow term is removed without archiving."""
    from shadowterms.ops.posts import delete_post as _delete

    result = _delete(ctx, post_id)

    if not result.success:
        return _handle_error(result, instance=str(request.url))

    return SuccessResponse(data=_dc(result.data), elapsed_ms=result.elapsed_ms, warnings=result.warnings)
