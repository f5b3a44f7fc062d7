"""Storage service: the blob store client used by the core.

Wraps a ``BlobStore`` backend with key generation, upload error translation
and the default signed URL lifetime.

Examples:
    >>> from draftboard.storage.service import ImageUpload, StorageService
    >>> service = StorageService.from_config(config)
    >>> key = await service.store_image("user-1", ImageUpload("cat.png", data, "image/png"))
    >>> url = await service.signed_url(key)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from draftboard.errors import BackendUnavailable
from draftboard.storage.backends.base import BlobStore
from draftboard.storage.backends.local import LocalBlobStore
from draftboard.storage.backends.memory import MemoryBlobStore
from draftboard.storage.config import StorageConfig
from draftboard.storage.errors import BlobStoreError
from draftboard.storage.naming import generate_image_key
from draftboard.storage.signing import UrlSigner

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageUpload:
    """An uploaded image waiting to be stored.

    Attributes:
        filename: Original filename, only its extension is kept.
        data: Raw image bytes.
        content_type: MIME type reported by the client.
    """

    filename: str | None
    data: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


class StorageService:
    """Blob store client for post images.

    Attributes:
        config: Storage configuration.
        backend: Blob store backend for I/O.
    """

    def __init__(self, config: StorageConfig, backend: BlobStore | None = None) -> None:
        self.config = config
        self.signer = UrlSigner(config.signing_secret, config.public_base_url)
        self.backend = backend or LocalBlobStore(config.root, self.signer, config.bucket)

    @classmethod
    def from_config(cls, config: StorageConfig, backend: str = "local") -> "StorageService":
        """Create a StorageService with the named backend ("local" or "memory")."""
        signer = UrlSigner(config.signing_secret, config.public_base_url)
        if backend == "memory":
            store: BlobStore = MemoryBlobStore(signer)
        elif backend == "local":
            store = LocalBlobStore(config.root, signer, config.bucket)
        else:
            raise ValueError(f"Unknown storage backend: {backend}")
        return cls(config=config, backend=store)

    async def store_image(
        self,
        owner_id: str,
        image: ImageUpload,
        now: datetime | None = None,
    ) -> str:
        """Upload an image under a freshly generated key.

        Args:
            owner_id: Owner the key is generated for.
            image: The upload.
            now: Override timestamp for key generation.

        Returns:
            The new key.

        Raises:
            BackendUnavailable: If the upload fails.
        """
        key = generate_image_key(owner_id, image.filename, now)
        try:
            await self.backend.upload(key, image.data, image.content_type)
        except BlobStoreError as e:
            logger.error(f"Image upload failed for {key}: {e}")
            raise BackendUnavailable("image upload", e) from e
        logger.info(f"Image stored: {key} ({image.size} bytes)")
        return key

    async def remove(self, key: str) -> None:
        """Delete an image. Missing keys are fine; I/O failures propagate.

        Raises:
            BlobStoreError: If the backend cannot delete the object.
        """
        await self.backend.delete(key)
        logger.info(f"Image deleted: {key}")

    async def exists(self, key: str) -> bool:
        return await self.backend.exists(key)

    async def read(self, key: str) -> bytes:
        return await self.backend.read(key)

    async def content_type(self, key: str) -> str | None:
        return await self.backend.content_type(key)

    async def signed_url(self, key: str, ttl_seconds: int | None = None) -> str:
        """Mint a signed URL for ``key``.

        Raises:
            BlobStoreError: If the object is missing or signing fails.
        """
        ttl = ttl_seconds if ttl_seconds is not None else self.config.signed_url_ttl_seconds
        return await self.backend.sign_url(key, ttl)

    def verify_token(self, token: str, key: str) -> None:
        """Check a signed URL token (raises ``InvalidSignature``)."""
        self.signer.verify(token, key)
