"""Pydantic schemas shared by the core services and the API.

Covers the post field sets used for create/update, the view filter, and
the post view returned to callers.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from draftboard.models import Post, PostCategory


class SortOrder(str, Enum):
    """Sort order by creation time."""

    ASC = "asc"
    DESC = "desc"


class UsedFilter(str, Enum):
    """Filter on the used flag."""

    ALL = "all"
    USED = "used"
    UNUSED = "unused"


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class PostFilter(BaseModel):
    """View filter state. Ephemeral, built per request.

    Attributes:
        sort_order: Ascending or descending by created_at
        category: Exact category match, None for all categories
        used: all / used / unused
    """

    sort_order: SortOrder = SortOrder.DESC
    category: PostCategory | None = None
    used: UsedFilter = UsedFilter.ALL

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        return _blank_to_none(v)


class PostFields(BaseModel):
    """Fields accepted when creating a post."""

    title: str = Field(..., max_length=200)
    description: str = ""
    category: PostCategory | None = None
    used: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        return _blank_to_none(v)


class PostUpdate(BaseModel):
    """Partial update. Only explicitly set fields are written."""

    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    category: PostCategory | None = None
    used: bool | None = None

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        return _blank_to_none(v)


class PostView(BaseModel):
    """A post as shown to its owner.

    ``image_url`` is a signed, short-lived URL (empty when the post has no
    image or the URL could not be minted). ``image_path`` keeps the raw
    blob key, which edit and delete operations need.
    """

    id: str
    title: str
    description: str
    image_url: str = ""
    image_path: str = ""
    category: PostCategory | None = None
    used: bool = False
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_post(cls, post: Post, image_url: str = "") -> "PostView":
        return cls(
            id=post.id,
            title=post.title,
            description=post.description or "",
            image_url=image_url,
            image_path=post.image_key or "",
            category=post.category,
            used=post.used,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostListResponse(BaseModel):
    """Filtered list of posts."""

    items: list[PostView]
    total: int


class DeleteResponse(BaseModel):
    """Response after deleting a post."""

    id: str
    deleted: bool
    message: str
