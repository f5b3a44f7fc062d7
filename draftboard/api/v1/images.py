"""Signed image delivery.

Endpoints:
    GET /api/v1/images/{key}?token=... - Serve a blob if the token grants access to it

Signed URLs minted by the blob store point here. The token is the only
credential: no Authorization header is needed, and it expires with the URL.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response

from draftboard.api.dependencies import get_storage_service
from draftboard.storage.errors import BlobNotFound, InvalidSignature
from draftboard.storage.service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/images", tags=["images"])


@router.get("/{key}")
async def get_signed_image(
    key: str,
    token: str = Query(..., description="Signed URL token"),
    storage: StorageService = Depends(get_storage_service),
) -> Response:
    """Return the image bytes for a valid signed URL.

    Raises:
        HTTPException 403: If the token is invalid, expired, or for another key.
        HTTPException 404: If the blob no longer exists.
    """
    try:
        storage.verify_token(token, key)
    except InvalidSignature as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))

    try:
        data = await storage.read(key)
    except BlobNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")

    media_type = await storage.content_type(key) or "application/octet-stream"
    return Response(
        content=data,
        media_type=media_type,
        headers={"Cache-Control": "private, max-age=300"},
    )
