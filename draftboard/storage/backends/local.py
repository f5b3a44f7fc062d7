"""Local filesystem blob store using pathlib."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from draftboard.storage.backends.base import BlobStore
from draftboard.storage.errors import BlobAlreadyExists, BlobNotFound, BlobStoreError
from draftboard.storage.signing import UrlSigner

META_SUFFIX = ".meta.json"


class LocalBlobStore(BlobStore):
    """Pathlib-based blob store rooted at ``{root}/{bucket}``.

    Blocking filesystem calls run in a worker thread.
    """

    def __init__(self, root: str, signer: UrlSigner, bucket: str = "post-images") -> None:
        super().__init__(signer)
        self.base = Path(root) / bucket

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise BlobStoreError(f"Invalid blob key: {key!r}")
        return self.base / key

    def _write(self, key: str, data: bytes, content_type: str | None) -> None:
        p = self._path(key)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BlobStoreError(f"Bucket directory unavailable: {e}") from e
        try:
            with p.open("xb") as f:
                f.write(data)
            if content_type:
                meta = p.with_name(p.name + META_SUFFIX)
                meta.write_text(json.dumps({"content_type": content_type}), encoding="utf-8")
        except FileExistsError:
            raise BlobAlreadyExists(key)
        except OSError as e:
            # No data file survives a failed upload.
            try:
                p.unlink(missing_ok=True)
            except OSError as cleanup_error:
                raise BlobStoreError(
                    f"Failed to write {key}: {e} (cleanup failed: {cleanup_error})"
                ) from e
            raise BlobStoreError(f"Failed to write {key}: {e}") from e

    def _unlink(self, key: str) -> None:
        p = self._path(key)
        try:
            p.unlink(missing_ok=True)
            p.with_name(p.name + META_SUFFIX).unlink(missing_ok=True)
        except OSError as e:
            raise BlobStoreError(f"Failed to delete {key}: {e}") from e

    def _read(self, key: str) -> bytes:
        p = self._path(key)
        try:
            return p.read_bytes()
        except FileNotFoundError:
            raise BlobNotFound(key)
        except OSError as e:
            raise BlobStoreError(f"Failed to read {key}: {e}") from e

    async def upload(self, key: str, data: bytes, content_type: str | None = None) -> None:
        """Write binary data to a new local file."""
        await asyncio.to_thread(self._write, key, data, content_type)

    async def delete(self, key: str) -> None:
        """Delete a local file if present."""
        await asyncio.to_thread(self._unlink, key)

    async def exists(self, key: str) -> bool:
        """Check if a local file exists."""
        return await asyncio.to_thread(self._path(key).is_file)

    async def read(self, key: str) -> bytes:
        """Read a local file."""
        return await asyncio.to_thread(self._read, key)

    async def content_type(self, key: str) -> str | None:
        meta = self._path(key)
        meta = meta.with_name(meta.name + META_SUFFIX)
        try:
            text = await asyncio.to_thread(meta.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        return json.loads(text).get("content_type")
