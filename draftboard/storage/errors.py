"""Blob store errors."""

from __future__ import annotations


class BlobStoreError(Exception):
    """Blob store operation failed."""


class BlobNotFound(BlobStoreError):
    """No object stored under the key."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Blob not found: {key}")
        self.key = key


class BlobAlreadyExists(BlobStoreError):
    """Upload refused because the key is taken (uploads never overwrite)."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Blob already exists: {key}")
        self.key = key


class InvalidSignature(BlobStoreError):
    """A signed URL token is expired, tampered with, or minted for another key."""
