"""
Shared API router utilities.

- ``_dc()`` - convert a dataclass or dict to a plain dict
- ``_handle_error()`` - convert a failed OperationResult to a ``problem_response``
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from shadowterms.api.middleware.errors import problem_response, status_for_error_code


def _dc(obj: Any) -> dict[str, Any]:
    """Convert a dataclass (or dict) to a plain dict."""
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    return obj if isinstance(obj, dict) else {}


def _handle_error(result: Any, instance: str = ""):
    """Convert a failed ``OperationResult`` into a Problem Details response."""
    code = result.error.code if result.error else "INTERNAL"
    message = result.error.message if result.error else "Operation failed"
    return problem_response(
        status=status_for_error_code(code),
        title=message,
        detail=code,
        instance=instance,
    )
