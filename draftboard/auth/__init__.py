"""Auth module: bearer JWT decoding into an explicit owner context."""

from draftboard.auth.context import OwnerContext
from draftboard.auth.dependencies import get_owner_context, require_admin_key
from draftboard.auth.jwt_handler import (
    create_access_token,
    decode_access_token,
    dev_owner_id,
)

__all__ = [
    "OwnerContext",
    "create_access_token",
    "decode_access_token",
    "dev_owner_id",
    "get_owner_context",
    "require_admin_key",
]
