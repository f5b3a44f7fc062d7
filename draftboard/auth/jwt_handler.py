"""JWT access token management.

Access tokens: HS256, ``sub`` is the owner id issued by the identity provider.
"""

from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone

import jwt

from draftboard.config import get_settings

logger = logging.getLogger(__name__)


def create_access_token(owner_id: str) -> str:
    """Create an HS256 access token.

    Args:
        owner_id: The owner's id.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": owner_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_ACCESS_EXPIRE_MINUTES),
        "type": "access",
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm="HS256")


def decode_access_token(token: str) -> str:
    """Decode and validate an access token.

    Args:
        token: The encoded JWT.

    Returns:
        owner_id (sub claim).

    Raises:
        ValueError: If token is invalid or expired.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=["HS256"]
        )
    except jwt.ExpiredSignatureError:
        raise ValueError("Access token has expired")
    except jwt.InvalidTokenError as e:
        raise ValueError(f"Invalid access token: {e}")

    if payload.get("type") != "access":
        raise ValueError("Token is not an access token")

    sub = payload.get("sub")
    if not sub:
        raise ValueError("Token missing subject")
    return sub


def dev_owner_id(email: str) -> str:
    """Deterministic owner id for a dev email, stable across token requests."""
    email_hash = hashlib.sha256(email.strip().lower().encode()).hexdigest()[:16]
    return f"dev_{email_hash}"
