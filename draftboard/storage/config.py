"""Storage configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field


class StorageConfig(BaseModel):
    """Configuration for blob storage.

    Attributes:
        root: Root directory for the local backend.
        bucket: Bucket name, a subdirectory of root for the local backend.
        signing_secret: HS256 secret for signed image URLs.
        signed_url_ttl_seconds: Default signed URL lifetime.
        public_base_url: Base URL that signed image URLs point at.
    """

    root: str = Field(default="./output/blobs", description="Blob storage root directory")
    bucket: str = Field(default="post-images", description="Bucket holding post images")
    signing_secret: str = Field(..., description="Secret for signed image URLs")
    signed_url_ttl_seconds: int = Field(default=3600, ge=1, description="Signed URL lifetime")
    public_base_url: str = Field(
        default="http://localhost:8000", description="Base URL for signed image URLs"
    )
