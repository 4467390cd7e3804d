"""
Associations router: the association endpoint.

Endpoints:
    POST /associations    Relate targetId to the shadow term of sourceId

The edit capability is checked before the handler body runs.  Outcomes
the caller can act on (source not participating, no live term) come back
as ``200`` with ``success=false``; only unexpected failures are errors.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from shadowterms.api.deps import EditCapability, OpContext
from shadowterms.api.schemas.associations import AssociationRequestBody, AssociationResponse
from shadowterms.api.utils import _handle_error
from shadowterms.ops.associations import SOFT_FAILURE_CODES

router = APIRouter(prefix="/associations")


@router.post("", response_model=AssociationResponse, dependencies=[EditCapability])
def create_association(
    ctx: OpContext,
    body: AssociationRequestBody,
    request: Request,
):
    """Relate a post to another post's shadow term.

    If the source post is not published the target is stored as pending
    and linked when the source is published.
    """
    from shadowterms.ops.associations import associate
    from shadowterms.ops.requests import AssociateRequest

    result = associate(ctx, AssociateRequest(source_id=body.source_id, target_id=body.target_id))

    if not result.success:
        if result.error is not None and result.error.code in SOFT_FAILURE_CODES:
            return AssociationResponse(success=False, message=result.error.message, posts=[])
        return _handle_error(result, instance=str(request.url))

    if result.data is None:
        return _handle_error(result, instance=str(request.url))
    return AssociationResponse(success=True, message=result.data.message, posts=result.data.posts)
