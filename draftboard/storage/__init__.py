"""Blob storage package for draftboard.

Stores post images under generated keys and hands out signed,
time-limited URLs for them.

Examples:
    >>> from draftboard.storage import StorageService, StorageConfig
    >>> service = StorageService.from_config(StorageConfig(signing_secret="s"), backend="memory")
    >>> key = await service.store_image("user-1", upload)
"""

from draftboard.storage.config import StorageConfig
from draftboard.storage.errors import (
    BlobAlreadyExists,
    BlobNotFound,
    BlobStoreError,
    InvalidSignature,
)
from draftboard.storage.naming import extract_extension, generate_image_key
from draftboard.storage.service import ImageUpload, StorageService
from draftboard.storage.signing import UrlSigner

__all__ = [
    "BlobAlreadyExists",
    "BlobNotFound",
    "BlobStoreError",
    "ImageUpload",
    "InvalidSignature",
    "StorageConfig",
    "StorageService",
    "UrlSigner",
    "extract_extension",
    "generate_image_key",
]
