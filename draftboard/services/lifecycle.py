"""Image lifecycle coordinator.

The only component that pairs a post record mutation with a blob store
mutation. Ordering per operation:

    create                  upload new -> insert record
    update, remove image    delete old -> write record (key = null)
    update, replace image   upload new -> write record (new key) -> delete old
    update, keep image      write record (key preserved)
    delete                  delete record -> delete blob

Uploads happen before any write that references them, so a failed upload
never destroys a still-referenced image. Blob deletes after a committed
record change are best effort: a failure leaves an orphaned blob, which is
reported on the ``draftboard.orphans`` logger and as a
``StorageOrphanWarning`` but never fails the operation.

Mutations are shielded from caller cancellation so a record and its blob
are never left half-updated by an abandoned request.

Tests:
    - tests/unit/test_lifecycle.py
"""

from __future__ import annotations

import asyncio
import logging
import warnings

from draftboard.auth.context import OwnerContext
from draftboard.errors import StorageOrphanWarning
from draftboard.models import Post
from draftboard.notifications import NotificationSink, NotificationType
from draftboard.repositories.posts import PostRepository, require_title
from draftboard.schemas import PostFields, PostUpdate
from draftboard.storage.errors import BlobStoreError
from draftboard.storage.service import ImageUpload, StorageService

logger = logging.getLogger(__name__)
orphan_logger = logging.getLogger("draftboard.orphans")


class ImageLifecycleCoordinator:
    """Sequences blob store and repository calls for post mutations.

    Attributes:
        repository: Post repository.
        storage: Blob store client.
        notifier: Optional sink for start/success/failure messages.
    """

    def __init__(
        self,
        repository: PostRepository,
        storage: StorageService,
        notifier: NotificationSink | None = None,
    ) -> None:
        self.repository = repository
        self.storage = storage
        self.notifier = notifier
        self._inflight: set[asyncio.Task] = set()

    # ----------------- helpers ----------------- #

    async def _shielded(self, coro) -> Post:
        """Run a mutation as a task that outlives a cancelled caller.

        The task is held in ``_inflight`` until it finishes so it is not
        garbage collected once the caller stops awaiting it.
        """
        task = asyncio.ensure_future(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return await asyncio.shield(task)

    def _notify(self, owner: OwnerContext, message: str, type: NotificationType) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify(owner.owner_id, message, type)
        except Exception as e:
            logger.warning(f"Notification sink failed ({message!r}): {e}")

    def _report_orphan(self, key: str, post_id: str | None, reason: str, error: Exception) -> None:
        message = (
            f"Orphaned blob {key} (post {post_id or 'unsaved'}, {reason}): {error}"
        )
        orphan_logger.warning(message)
        warnings.warn(message, StorageOrphanWarning, stacklevel=2)

    async def _discard(self, key: str, post_id: str | None, reason: str) -> bool:
        """Delete a blob whose record change is already settled.

        Returns:
            True if the blob was deleted, False if it was left orphaned.
        """
        try:
            await self.storage.remove(key)
        except BlobStoreError as e:
            self._report_orphan(key, post_id, reason, e)
            return False
        return True

    # ----------------- create ----------------- #

    async def create_post(
        self,
        owner: OwnerContext,
        fields: PostFields,
        image: ImageUpload | None = None,
    ) -> Post:
        """Create a post, uploading its image first when one is given.

        Raises:
            ValidationError: If the title is empty (before any upload).
            BackendUnavailable: If the upload or the insert fails.
        """
        return await self._shielded(self._create(owner, fields, image))

    async def _create(
        self,
        owner: OwnerContext,
        fields: PostFields,
        image: ImageUpload | None,
    ) -> Post:
        self._notify(owner, "Creating post...", NotificationType.INFO)
        try:
            require_title(fields.title)

            new_key = None
            if image is not None:
                new_key = await self.storage.store_image(owner.owner_id, image)

            try:
                post = await self.repository.create(owner, fields, image_key=new_key)
            except Exception:
                if new_key:
                    await self._discard(new_key, None, "insert failed")
                raise
        except Exception as e:
            self._notify(owner, f"Failed to add post: {e}", NotificationType.ERROR)
            raise

        self._notify(owner, "Post created", NotificationType.SUCCESS)
        return post

    # ----------------- update ----------------- #

    async def update_post(
        self,
        owner: OwnerContext,
        post_id: str,
        fields: PostUpdate,
        image: ImageUpload | None = None,
        remove_image: bool = False,
    ) -> Post:
        """Update a post and reconcile its image.

        ``remove_image`` takes precedence over a new image when the post
        already has one.

        Raises:
            NotFound: If the owner has no such post.
            ValidationError: If the title is set to an empty value.
            BackendUnavailable: If the upload or the record write fails.
        """
        return await self._shielded(
            self._update(owner, post_id, fields, image, remove_image)
        )

    async def _update(
        self,
        owner: OwnerContext,
        post_id: str,
        fields: PostUpdate,
        image: ImageUpload | None,
        remove_image: bool,
    ) -> Post:
        self._notify(owner, "Saving post...", NotificationType.INFO)
        try:
            changes = fields.model_dump(exclude_unset=True)
            if "title" in changes:
                require_title(changes["title"])

            existing = await self.repository.get(owner, post_id)
            old_key = existing.image_key

            if old_key and remove_image:
                await self._discard(old_key, post_id, "image removed")
                changes["image_key"] = None
                post = await self.repository.update(owner, post_id, changes)

            elif image is not None:
                new_key = await self.storage.store_image(owner.owner_id, image)
                changes["image_key"] = new_key
                try:
                    post = await self.repository.update(owner, post_id, changes)
                except Exception:
                    await self._discard(new_key, post_id, "update failed")
                    raise
                if old_key:
                    await self._discard(old_key, post_id, "image replaced")

            else:
                post = await self.repository.update(owner, post_id, changes)
        except Exception as e:
            self._notify(owner, f"Failed to save post: {e}", NotificationType.ERROR)
            raise

        self._notify(owner, "Post updated", NotificationType.SUCCESS)
        return post

    # ----------------- delete ----------------- #

    async def delete_post(self, owner: OwnerContext, post_id: str) -> Post:
        """Delete a post record, then its image.

        Returns:
            The deleted post snapshot.

        Raises:
            NotFound: If the owner has no such post (e.g. already deleted).
            BackendUnavailable: If the record delete fails.
        """
        return await self._shielded(self._delete(owner, post_id))

    async def _delete(self, owner: OwnerContext, post_id: str) -> Post:
        self._notify(owner, "Deleting post...", NotificationType.INFO)
        try:
            post = await self.repository.delete(owner, post_id)
        except Exception as e:
            self._notify(owner, f"Failed to delete post: {e}", NotificationType.ERROR)
            raise

        if post.image_key:
            await self._discard(post.image_key, post_id, "post deleted")

        self._notify(owner, "Post deleted", NotificationType.SUCCESS)
        return post
