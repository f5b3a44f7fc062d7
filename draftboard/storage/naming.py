"""Image key generation for blob storage.

Format: {owner_id}-{epoch_millis}.{extension}

Examples:
    >>> from datetime import datetime, timezone
    >>> from draftboard.storage.naming import extract_extension, generate_image_key
    >>> generate_image_key("u1", "cat.PNG", datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc))
    'u1-1000.PNG'
    >>> extract_extension("archive.tar.gz")
    'gz'
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

DEFAULT_EXTENSION = "bin"


def extract_extension(filename: str | None) -> str:
    """Return the text after the last dot, reduced to [A-Za-z0-9].

    Falls back to ``bin`` when the name has no dot or nothing survives.
    """
    if not filename or "." not in filename:
        return DEFAULT_EXTENSION
    ext = re.sub(r"[^A-Za-z0-9]", "", filename.rsplit(".", 1)[-1])
    return ext or DEFAULT_EXTENSION


def epoch_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)


def generate_image_key(
    owner_id: str,
    filename: str | None,
    now: datetime | None = None,
) -> str:
    """Generate the blob key for a new upload.

    Keys collide only when the same owner uploads two files with the same
    extension within one millisecond.

    Args:
        owner_id: Owner of the post the image belongs to.
        filename: Original upload filename (used for the extension only).
        now: Override timestamp (defaults to now UTC).

    Returns:
        Key string.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return f"{owner_id}-{epoch_millis(now)}.{extract_extension(filename)}"
