"""Unit tests for the post view service.

Signed URL resolution and per-item degradation when signing fails.
"""

from datetime import datetime, timezone
from urllib.parse import parse_qs, urlparse

import pytest

from draftboard.errors import NotFound
from draftboard.schemas import PostFilter, SortOrder
from draftboard.services.post_view import PostViewService


def at(day: int) -> datetime:
    return datetime(2026, 4, day, tzinfo=timezone.utc)


@pytest.mark.fast
class TestPostViewService:
    """Tests for list_posts(), get_post() and to_view()."""

    @pytest.mark.asyncio
    async def test_plain_post_has_empty_url(self, views, owner, insert_post):
        await insert_post("u1", "Plain")
        [view] = await views.list_posts(owner)
        assert view.image_url == ""
        assert view.image_path == ""

    @pytest.mark.asyncio
    async def test_signed_url_for_image(self, views, owner, insert_post, blob_store, storage):
        await blob_store.upload("u1-1000.png", b"img", "image/png")
        await insert_post("u1", "Pic", image_key="u1-1000.png")

        [view] = await views.list_posts(owner)
        assert view.image_path == "u1-1000.png"
        parsed = urlparse(view.image_url)
        assert parsed.path == "/api/v1/images/u1-1000.png"
        storage.verify_token(parse_qs(parsed.query)["token"][0], "u1-1000.png")

    @pytest.mark.asyncio
    async def test_missing_blob_degrades_single_item(self, views, owner, insert_post, blob_store):
        await blob_store.upload("u1-1000.png", b"img")
        await insert_post("u1", "Good", image_key="u1-1000.png", created_at=at(1))
        await insert_post("u1", "Orphaned record", image_key="u1-2000.png", created_at=at(2))

        views_by_title = {v.title: v for v in await views.list_posts(owner)}
        assert views_by_title["Good"].image_url
        assert views_by_title["Orphaned record"].image_url == ""
        assert views_by_title["Orphaned record"].image_path == "u1-2000.png"

    @pytest.mark.asyncio
    async def test_signing_failure_degrades(self, views, owner, insert_post, blob_store):
        await blob_store.upload("u1-1000.png", b"img")
        await insert_post("u1", "Pic", image_key="u1-1000.png")
        blob_store.fail_sign = True

        [view] = await views.list_posts(owner)
        assert view.title == "Pic"
        assert view.image_url == ""

    @pytest.mark.asyncio
    async def test_preserves_repository_order(self, views, owner, insert_post, blob_store):
        for day in (1, 2, 3):
            await blob_store.upload(f"u1-{day}.png", b"img")
            await insert_post("u1", f"Day {day}", image_key=f"u1-{day}.png", created_at=at(day))

        desc = await views.list_posts(owner, PostFilter(sort_order=SortOrder.DESC))
        asc = await views.list_posts(owner, PostFilter(sort_order=SortOrder.ASC))
        assert [v.title for v in desc] == ["Day 3", "Day 2", "Day 1"]
        assert [v.title for v in asc] == ["Day 1", "Day 2", "Day 3"]

    @pytest.mark.asyncio
    async def test_get_post(self, views, owner, other_owner, insert_post):
        post = await insert_post("u1", "Mine")
        assert (await views.get_post(owner, post.id)).title == "Mine"
        with pytest.raises(NotFound):
            await views.get_post(other_owner, post.id)

    @pytest.mark.asyncio
    async def test_ttl_passed_through(self, repository, storage, owner, insert_post, blob_store, monkeypatch):
        seen = []

        async def fake_signed_url(key, ttl_seconds=None):
            seen.append((key, ttl_seconds))
            return "http://test/signed"

        monkeypatch.setattr(storage, "signed_url", fake_signed_url)
        await insert_post("u1", "Pic", image_key="u1-1000.png")

        service = PostViewService(repository, storage, ttl_seconds=42)
        [view] = await service.list_posts(owner)
        assert view.image_url == "http://test/signed"
        assert seen == [("u1-1000.png", 42)]
