"""
Association endpoint schemas.

The request accepts ``sourceId`` / ``targetId`` (or their snake_case
names).  Ids are parsed tolerantly: anything that is not integer-like
becomes ``0``, which resolves to "not participating" for the source and
is never stored for the target.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shadowterms.ops.requests import coerce_id


class AssociationRequestBody(BaseModel):
    """Request body for ``POST /associations``."""

    model_config = ConfigDict(populate_by_name=True)

    source_id: int = Field(default=0, alias="sourceId", description="Post whose shadow term is the target")
    target_id: int = Field(default=0, alias="targetId", description="Post to relate")

    @field_validator("source_id", "target_id", mode="before")
    @classmethod
    def _coerce(cls, value: Any) -> int:
        return coerce_id(value)


class AssociationResponse(BaseModel):
    """Response body for ``POST /associations``.

    ``posts`` is the pending list when the source is not published, and
    the posts (published or draft) related to its live term otherwise.
    """

    success: bool
    message: str
    posts: list[int] = Field(default_factory=list)
