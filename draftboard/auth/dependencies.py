"""FastAPI dependencies for authentication.

Every post route requires a bearer token; the decoded subject becomes the
``OwnerContext`` handed to the core.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status

from draftboard.auth.context import OwnerContext
from draftboard.auth.jwt_handler import decode_access_token
from draftboard.config import get_settings

logger = logging.getLogger(__name__)


async def get_owner_context(request: Request) -> OwnerContext:
    """Resolve the calling owner from the Authorization header.

    Raises:
        HTTPException 401: If the header is missing or the token is invalid.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = auth_header[len("Bearer "):]

    try:
        owner_id = decode_access_token(token)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )

    return OwnerContext(owner_id=owner_id)


async def require_admin_key(request: Request) -> None:
    """Verify the X-Admin-Key header matches ADMIN_API_KEY.

    Returns 403 if the key is empty (disabled) or doesn't match.
    """
    settings = get_settings()
    if not settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin endpoints are disabled (ADMIN_API_KEY not set)",
        )

    provided = request.headers.get("X-Admin-Key", "")
    if provided != settings.ADMIN_API_KEY:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin key",
        )
