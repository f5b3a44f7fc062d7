"""In-memory blob store for tests and throwaway dev runs."""

from __future__ import annotations

from draftboard.storage.backends.base import BlobStore
from draftboard.storage.errors import BlobAlreadyExists, BlobNotFound
from draftboard.storage.signing import UrlSigner


class MemoryBlobStore(BlobStore):
    """Dict-backed blob store. Contents are lost when the process exits."""

    def __init__(self, signer: UrlSigner) -> None:
        super().__init__(signer)
        self.objects: dict[str, tuple[bytes, str | None]] = {}

    async def upload(self, key: str, data: bytes, content_type: str | None = None) -> None:
        if key in self.objects:
            raise BlobAlreadyExists(key)
        self.objects[key] = (bytes(data), content_type)

    async def delete(self, key: str) -> None:
        self.objects.pop(key, None)

    async def exists(self, key: str) -> bool:
        return key in self.objects

    async def read(self, key: str) -> bytes:
        try:
            return self.objects[key][0]
        except KeyError:
            raise BlobNotFound(key)

    async def content_type(self, key: str) -> str | None:
        entry = self.objects.get(key)
        return entry[1] if entry else None
