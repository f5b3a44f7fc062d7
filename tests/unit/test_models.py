"""Unit tests for database models and schemas.

Tests for draftboard/models.py and draftboard/schemas.py.

Run with:
    pytest tests/unit/test_models.py -v
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import text

from draftboard.models import Post, PostCategory
from draftboard.schemas import PostFields, PostFilter, PostUpdate, PostView, SortOrder, UsedFilter


@pytest.mark.fast
class TestPostCategory:
    """Tests for PostCategory enum."""

    def test_values(self):
        assert [c.value for c in PostCategory] == [
            "Email Marketing",
            "SEO & Analytics",
            "Web Development",
            "E-commerce",
        ]

    def test_lookup_by_value(self):
        assert PostCategory("E-commerce") is PostCategory.E_COMMERCE


@pytest.mark.fast
class TestPostModel:
    """Tests for the Post model."""

    def test_repr(self):
        post = Post(id="abc", owner_id="u1", title="Hello")
        assert "abc" in repr(post)

    @pytest.mark.asyncio
    async def test_category_stored_by_value(self, insert_post, session_factory):
        post = await insert_post("u1", "SEO", category=PostCategory.SEO_ANALYTICS)
        async with session_factory() as session:
            result = await session.execute(
                text("SELECT category FROM posts WHERE id = :id"), {"id": post.id}
            )
            assert result.scalar_one() == "SEO & Analytics"

    @pytest.mark.asyncio
    async def test_timestamps_set(self, insert_post):
        post = await insert_post("u1", "Stamped")
        assert post.created_at is not None
        assert post.updated_at is not None


@pytest.mark.fast
class TestSchemas:
    """Tests for request/filter schemas."""

    def test_filter_defaults(self):
        f = PostFilter()
        assert f.sort_order == SortOrder.DESC
        assert f.category is None
        assert f.used == UsedFilter.ALL

    def test_filter_rejects_unknown_category(self):
        with pytest.raises(PydanticValidationError):
            PostFilter(category="Knitting")

    def test_fields_blank_category_is_none(self):
        assert PostFields(title="x", category="  ").category is None

    def test_fields_title_max_length(self):
        PostFields(title="x" * 200)
        with pytest.raises(PydanticValidationError):
            PostFields(title="x" * 201)

    def test_update_tracks_set_fields(self):
        update = PostUpdate(used=True)
        assert update.model_dump(exclude_unset=True) == {"used": True}

    def test_update_explicit_none_category(self):
        update = PostUpdate(category=None)
        assert update.model_dump(exclude_unset=True) == {"category": None}

    def test_view_from_post(self):
        created = datetime(2026, 1, 1, tzinfo=timezone.utc)
        post = Post(
            id="p1",
            owner_id="u1",
            title="T",
            description=None,
            image_key="u1-1000.png",
            category=PostCategory.WEB_DEVELOPMENT,
            used=False,
            created_at=created,
            updated_at=created,
        )
        view = PostView.from_post(post, image_url="http://test/signed")
        assert view.description == ""
        assert view.image_path == "u1-1000.png"
        assert view.image_url == "http://test/signed"
        assert view.category == PostCategory.WEB_DEVELOPMENT
