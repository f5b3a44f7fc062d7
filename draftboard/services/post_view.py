"""Post view service: filtered post lists with signed image URLs.

Signing runs concurrently across the posts of one list. A post whose URL
cannot be minted is shown without an image instead of failing the list.
"""

from __future__ import annotations

import asyncio
import logging

from draftboard.auth.context import OwnerContext
from draftboard.models import Post
from draftboard.repositories.posts import PostRepository
from draftboard.schemas import PostFilter, PostView
from draftboard.storage.service import StorageService

logger = logging.getLogger(__name__)

DEFAULT_URL_TTL_SECONDS = 60 * 60


class PostViewService:
    """Composes repository reads with signed URL resolution.

    Attributes:
        repository: Post repository.
        storage: Blob store client.
        ttl_seconds: Signed URL lifetime.
    """

    def __init__(
        self,
        repository: PostRepository,
        storage: StorageService,
        ttl_seconds: int = DEFAULT_URL_TTL_SECONDS,
    ) -> None:
        self.repository = repository
        self.storage = storage
        self.ttl_seconds = ttl_seconds

    async def to_view(self, post: Post) -> PostView:
        """Wrap a post with a signed URL, degrading to no image on failure."""
        if not post.image_key:
            return PostView.from_post(post)
        try:
            url = await self.storage.signed_url(post.image_key, self.ttl_seconds)
        except Exception as e:
            logger.warning(f"Signed URL failed for post {post.id} ({post.image_key}): {e}")
            url = ""
        return PostView.from_post(post, image_url=url)

    async def list_posts(
        self,
        owner: OwnerContext,
        filter: PostFilter | None = None,
    ) -> list[PostView]:
        """List the owner's posts with signed image URLs.

        Raises:
            BackendUnavailable: If the repository read fails.
        """
        posts = await self.repository.list(owner, filter)
        return list(await asyncio.gather(*(self.to_view(post) for post in posts)))

    async def get_post(self, owner: OwnerContext, post_id: str) -> PostView:
        """Single post with a signed image URL.

        Raises:
            NotFound: If the owner has no such post.
        """
        post = await self.repository.get(owner, post_id)
        return await self.to_view(post)
