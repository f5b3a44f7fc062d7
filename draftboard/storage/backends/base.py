"""Abstract base class for blob store backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from draftboard.storage.errors import BlobNotFound
from draftboard.storage.signing import UrlSigner


class BlobStore(ABC):
    """Abstract blob store for post images.

    Implementations store opaque bytes under a key, never overwrite an
    existing key, treat deleting a missing key as success, and issue
    signed URLs through a shared ``UrlSigner``.
    """

    def __init__(self, signer: UrlSigner) -> None:
        self.signer = signer

    @abstractmethod
    async def upload(self, key: str, data: bytes, content_type: str | None = None) -> None:
        """Store binary data under a new key.

        Args:
            key: Object key.
            data: Binary data to write.
            content_type: Optional MIME type recorded alongside the data.

        Raises:
            BlobAlreadyExists: If the key is already taken.
            BlobStoreError: On I/O failure.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete an object. Deleting a missing key is not an error.

        Args:
            key: Object key.
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if an object exists.

        Args:
            key: Object key.

        Returns:
            True if the object exists.
        """

    @abstractmethod
    async def read(self, key: str) -> bytes:
        """Read an object.

        Args:
            key: Object key.

        Returns:
            The stored bytes.

        Raises:
            BlobNotFound: If no object exists under the key.
        """

    async def content_type(self, key: str) -> str | None:
        """MIME type recorded at upload, if the backend keeps one."""
        return None

    async def sign_url(self, key: str, ttl_seconds: int) -> str:
        """Issue a signed, time-limited URL for an object.

        Args:
            key: Object key.
            ttl_seconds: URL lifetime.

        Returns:
            Signed URL string.

        Raises:
            BlobNotFound: If no object exists under the key.
        """
        if not await self.exists(key):
            raise BlobNotFound(key)
        return self.signer.sign(key, ttl_seconds)
