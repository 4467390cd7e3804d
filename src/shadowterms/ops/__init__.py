"""
Operations layer: transport-agnostic business logic for shadow terms.

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` (never raise)
- All functions support ``dry_run`` previews

Usage::

    from shadowterms.ops import OperationContext
    from shadowterms.ops.database import initialize_database
    from shadowterms.ops.posts import create_post
    from shadowterms.ops.requests import CreatePostRequest

    ctx = OperationContext(conn=my_connection)
    initialize_database(ctx)
    result = create_post(ctx, CreatePostRequest(post_type="example", title="Apple", status="publish"))
    assert result.data.shadow_term_id
"""

from shadowterms.ops.context import OperationContext
from shadowterms.ops.result import OperationError, OperationResult, PagedResult

__all__ = [
    "OperationContext",
    "OperationError",
    "OperationResult",
    "PagedResult",
]
