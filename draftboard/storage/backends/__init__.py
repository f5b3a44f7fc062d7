"""Blob store backends."""

from draftboard.storage.backends.base import BlobStore
from draftboard.storage.backends.local import LocalBlobStore
from draftboard.storage.backends.memory import MemoryBlobStore

__all__ = ["BlobStore", "LocalBlobStore", "MemoryBlobStore"]
