"""Post and index schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shadowterms.core.models import PostStatus


class PostSchema(BaseModel):
    """A post with its derived index fields."""

    id: int
    post_type: str
    title: str
    slug: str
    status: str
    shadow_taxonomy: str = Field(default="", description="Index category slug of the post's type")
    shadow_term_id: int = Field(default=0, description="Live shadow term id (0 when not published)")
    associated_posts: list[int] = Field(default_factory=list, description="Pending / archived related posts")
    index_action: str | None = Field(default=None, description="Reconciler action taken by this call")


class PostCreateRequest(BaseModel):
    """Request body for creating a post."""

    post_type: str = Field(..., min_length=1, description="Post type, e.g. 'example'")
    title: str = Field(default="", description="Post title")
    status: str = Field(default=PostStatus.DRAFT.value, min_length=1, description="Post status")
    slug: str = Field(default="", description="Slug; derived from the title when empty")


class PostUpdateRequest(BaseModel):
    """Request body for updating a post.  Omitted fields are unchanged."""

    title: str | None = None
    status: str | None = Field(default=None, min_length=1)
    slug: str | None = None


class IndexCategorySchema(BaseModel):
    """A registered index category."""

    slug: str
    post_type: str
    object_types: list[str] = Field(default_factory=list)
    label: str = ""
    description: str = ""
    entry_count: int = 0


class IndexEntrySchema(BaseModel):
    """A live shadow term."""

    id: int
    category: str
    name: str
    slug: str
    post_id: int = 0
