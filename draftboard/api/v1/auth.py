"""Auth API endpoints.

Endpoints:
    POST /api/v1/auth/dev/token - Issue an access token for a dev owner (X-Admin-Key)

Real sign-in belongs to the external identity provider; this endpoint only
exists so local setups and the CLI can obtain a bearer token.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from draftboard.auth.dependencies import require_admin_key
from draftboard.auth.jwt_handler import create_access_token, dev_owner_id
from draftboard.auth.schemas import DevTokenRequest, TokenResponse
from draftboard.config import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/dev/token", response_model=TokenResponse)
async def dev_token(
    request: DevTokenRequest,
    _admin: None = Depends(require_admin_key),
) -> TokenResponse:
    """Return an access token for the owner derived from ``email``.

    The owner id is stable for a given email, so repeated calls address the
    same post collection.
    """
    owner_id = dev_owner_id(request.email)
    logger.info(f"Dev token issued for {owner_id} ({request.email})")

    settings = get_settings()
    return TokenResponse(
        access_token=create_access_token(owner_id),
        owner_id=owner_id,
        expires_in=settings.JWT_ACCESS_EXPIRE_MINUTES * 60,
    )
