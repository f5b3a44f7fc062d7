"""Signed, time-limited image URL tokens.

Tokens are HS256 JWTs bound to a single blob key:
``{"sub": key, "exp": ..., "type": "image"}``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from urllib.parse import quote

import jwt

from draftboard.storage.errors import InvalidSignature

TOKEN_TYPE = "image"


class UrlSigner:
    """Mints and verifies signed URLs served by ``GET /api/v1/images/{key}``.

    Attributes:
        secret: HS256 secret.
        base_url: Public base URL of the API.
    """

    def __init__(self, secret: str, base_url: str = "http://localhost:8000") -> None:
        self.secret = secret
        self.base_url = base_url.rstrip("/")

    def mint_token(self, key: str, ttl_seconds: int) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": key,
            "iat": now,
            "exp": now + timedelta(seconds=ttl_seconds),
            "type": TOKEN_TYPE,
        }
        return jwt.encode(payload, self.secret, algorithm="HS256")

    def sign(self, key: str, ttl_seconds: int) -> str:
        """Build a signed URL for ``key`` valid for ``ttl_seconds``."""
        token = self.mint_token(key, ttl_seconds)
        return f"{self.base_url}/api/v1/images/{quote(key)}?token={token}"

    def verify(self, token: str, key: str) -> None:
        """Check that ``token`` grants access to ``key``.

        Raises:
            InvalidSignature: If the token is expired, invalid, or for another key.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            raise InvalidSignature("Signed URL has expired")
        except jwt.InvalidTokenError as e:
            raise InvalidSignature(f"Invalid signed URL: {e}")

        if payload.get("type") != TOKEN_TYPE:
            raise InvalidSignature("Token is not an image token")
        if payload.get("sub") != key:
            raise InvalidSignature("Signed URL does not match the requested image")
