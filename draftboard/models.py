"""SQLAlchemy models for draftboard.

Examples:
    >>> from draftboard.models import Post, PostCategory
    >>> post = Post(
    ...     owner_id="user-1",
    ...     title="Launch email",
    ...     category=PostCategory.EMAIL_MARKETING,
    ... )

Tests:
    - tests/unit/test_models.py
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SQLEnum, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """SQLAlchemy declarative base class."""

    pass


class PostCategory(str, Enum):
    """Fixed set of post categories. A null category means uncategorized."""

    EMAIL_MARKETING = "Email Marketing"
    SEO_ANALYTICS = "SEO & Analytics"
    WEB_DEVELOPMENT = "Web Development"
    E_COMMERCE = "E-commerce"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    """A draft post owned by a single user.

    Attributes:
        id: Unique identifier (UUID)
        owner_id: Identity-provider id of the owner
        title: Required title
        description: Free text, may be empty
        image_key: Blob store key of the attached image, or None
        category: One of PostCategory, or None for uncategorized
        used: Whether the draft has been used
        created_at: Creation timestamp, immutable, default sort key
        updated_at: Last update timestamp
    """

    __tablename__ = "posts"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image_key: Mapped[str | None] = mapped_column(String(512), default=None)
    category: Mapped[PostCategory | None] = mapped_column(
        SQLEnum(
            PostCategory,
            native_enum=False,
            length=50,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=None,
        index=True,
    )
    used: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id!r}, owner_id={self.owner_id!r}, title={self.title!r})>"
