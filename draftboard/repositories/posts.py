"""Post repository: owner-scoped queries and mutations on post records.

The repository never touches the blob store. Deleting a record that still
carries an image key leaves the blob alone; pairing the two is the
lifecycle coordinator's job.

Tests:
    - tests/unit/test_repository.py
"""

from __future__ import annotations

import logging
from typing import Any, NoReturn

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from draftboard.auth.context import OwnerContext
from draftboard.database import SessionFactory, get_session
from draftboard.errors import BackendUnavailable, NotFound, ValidationError
from draftboard.models import Post
from draftboard.schemas import PostFields, PostFilter, PostUpdate, SortOrder, UsedFilter

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "description", "category", "used", "image_key")


def require_title(title: str | None) -> str:
    if title is None or not title.strip():
        raise ValidationError("Title is required")
    return title.strip()


class PostRepository:
    """Filtered reads and mutations against the ``posts`` table.

    Every query is scoped to the owner in the given ``OwnerContext``.

    Attributes:
        session_factory: Returns an async context manager yielding a session
            that commits on success and rolls back on error.
    """

    def __init__(self, session_factory: SessionFactory = get_session) -> None:
        self.session_factory = session_factory

    def _handle_db_error(self, error: SQLAlchemyError, operation: str) -> NoReturn:
        logger.error(f"Database error during {operation}: {error}")
        raise BackendUnavailable(operation, error) from error

    @staticmethod
    def _owned(owner: OwnerContext, post_id: str):
        return select(Post).where(Post.id == post_id, Post.owner_id == owner.owner_id)

    async def list(self, owner: OwnerContext, filter: PostFilter | None = None) -> list[Post]:
        """List the owner's posts matching ``filter``.

        Args:
            owner: Owner scope (mandatory).
            filter: Category, used flag and sort order. Defaults to all posts, newest first.

        Returns:
            Matching posts, possibly empty.

        Raises:
            BackendUnavailable: On query failure.
        """
        filter = filter or PostFilter()
        stmt = select(Post).where(Post.owner_id == owner.owner_id)

        if filter.category is not None:
            stmt = stmt.where(Post.category == filter.category)

        if filter.used == UsedFilter.USED:
            stmt = stmt.where(Post.used.is_(True))
        elif filter.used == UsedFilter.UNUSED:
            stmt = stmt.where(Post.used.is_(False))

        if filter.sort_order == SortOrder.ASC:
            stmt = stmt.order_by(Post.created_at.asc(), Post.id.asc())
        else:
            stmt = stmt.order_by(Post.created_at.desc(), Post.id.desc())

        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except SQLAlchemyError as e:
            self._handle_db_error(e, "list")

    async def get(self, owner: OwnerContext, post_id: str) -> Post:
        """Fetch one of the owner's posts.

        Raises:
            NotFound: If the owner has no post with that id.
            BackendUnavailable: On query failure.
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(self._owned(owner, post_id))
                post = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self._handle_db_error(e, "get")

        if post is None:
            raise NotFound(post_id)
        return post

    async def create(
        self,
        owner: OwnerContext,
        fields: PostFields,
        image_key: str | None = None,
    ) -> Post:
        """Insert a new post.

        Args:
            owner: Owner of the new post.
            fields: Title, description, category, used.
            image_key: Key of an already-uploaded image, if any.

        Raises:
            ValidationError: If the title is empty.
            BackendUnavailable: On insert failure.
        """
        post = Post(
            owner_id=owner.owner_id,
            title=require_title(fields.title),
            description=fields.description or "",
            image_key=image_key or None,
            category=fields.category,
            used=fields.used,
        )

        try:
            async with self.session_factory() as session:
                session.add(post)
                await session.flush()
                await session.refresh(post)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "create")

        logger.info(f"Post created: {post.id} (owner {owner.owner_id})")
        return post

    async def update(
        self,
        owner: OwnerContext,
        post_id: str,
        fields: PostUpdate | dict[str, Any],
    ) -> Post:
        """Apply a partial update to one of the owner's posts.

        Only explicitly set fields are written. ``image_key`` may be passed in
        a dict by the coordinator; an empty string clears it.

        Raises:
            ValidationError: If the title is set to an empty value.
            NotFound: If the owner has no post with that id.
            BackendUnavailable: On update failure.
        """
        if isinstance(fields, PostUpdate):
            changes = fields.model_dump(exclude_unset=True)
        else:
            changes = dict(fields)

        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        if "title" in changes:
            changes["title"] = require_title(changes["title"])
        if "image_key" in changes:
            changes["image_key"] = changes["image_key"] or None
        if "description" in changes and changes["description"] is None:
            changes["description"] = ""
        if "used" in changes and changes["used"] is None:
            del changes["used"]

        try:
            async with self.session_factory() as session:
                result = await session.execute(self._owned(owner, post_id))
                post = result.scalar_one_or_none()
                if post is None:
                    raise NotFound(post_id)

                for key, value in changes.items():
                    setattr(post, key, value)

                await session.flush()
                await session.refresh(post)
        except SQLAlchemyError as e:
            self._handle_db_error(e, "update")

        logger.info(f"Post updated: {post_id} ({', '.join(sorted(changes)) or 'no changes'})")
        return post

    async def delete(self, owner: OwnerContext, post_id: str) -> Post:
        """Delete one of the owner's posts.

        Returns:
            The deleted post (detached), so callers can see its image key.

        Raises:
            NotFound: If the owner has no post with that id.
            BackendUnavailable: On delete failure.
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(self._owned(owner, post_id))
                post = result.scalar_one_or_none()
                if post is None:
                    raise NotFound(post_id)

                await session.delete(post)
                await session.flush()
        except SQLAlchemyError as e:
            self._handle_db_error(e, "delete")

        logger.info(f"Post deleted: {post_id}")
        return post
