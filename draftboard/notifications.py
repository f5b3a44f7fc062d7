"""Notification center: short-lived status messages for user actions.

Entries expire after their duration. When an event loop is running the
removal is scheduled with ``loop.call_later``; ``active()`` also prunes
anything past its expiry, so entries never outlive their duration even
without a loop.

Examples:
    >>> center = NotificationCenter()
    >>> note = center.show("user-1", "Post saved", NotificationType.SUCCESS)
    >>> [n.message for n in center.active("user-1")]
    ['Post saved']
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MS = 3000
_ID_ALPHABET = string.ascii_lowercase + string.digits


class NotificationType(str, Enum):
    """Notification severity."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


def _new_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


@dataclass
class Notification:
    """A single notification entry."""

    id: str
    owner_id: str
    message: str
    type: NotificationType
    duration_ms: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: float = 0.0

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "message": self.message,
            "type": self.type.value,
            "duration_ms": self.duration_ms,
            "created_at": self.created_at.isoformat(),
        }


class NotificationSink(Protocol):
    """Fire-and-forget receiver of status messages."""

    def notify(
        self,
        owner_id: str,
        message: str,
        type: NotificationType,
        duration_ms: int | None = None,
    ) -> None: ...


class NotificationCenter:
    """Expiring collection of notifications, keyed by id."""

    def __init__(self, default_duration_ms: int = DEFAULT_DURATION_MS) -> None:
        self.default_duration_ms = default_duration_ms
        self._entries: dict[str, Notification] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}

    def show(
        self,
        owner_id: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        duration_ms: int | None = None,
    ) -> Notification:
        """Add a notification and schedule its removal.

        Args:
            owner_id: Owner the message is for.
            message: Human-readable text.
            type: success, error or info.
            duration_ms: Lifetime; defaults to the center's default.

        Returns:
            The new entry.
        """
        duration = self.default_duration_ms if duration_ms is None else duration_ms
        note = Notification(
            id=_new_id(),
            owner_id=owner_id,
            message=message,
            type=type,
            duration_ms=duration,
            expires_at=time.monotonic() + duration / 1000,
        )
        self._entries[note.id] = note

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._timers[note.id] = loop.call_later(duration / 1000, self.hide, note.id)

        logger.debug(f"Notification [{type.value}] for {owner_id}: {message}")
        return note

    def notify(
        self,
        owner_id: str,
        message: str,
        type: NotificationType,
        duration_ms: int | None = None,
    ) -> None:
        self.show(owner_id, message, type, duration_ms)

    def hide(self, notification_id: str) -> bool:
        """Remove a notification and cancel its timer.

        Returns:
            True if the entry existed.
        """
        timer = self._timers.pop(notification_id, None)
        if timer is not None:
            timer.cancel()
        return self._entries.pop(notification_id, None) is not None

    def get(self, notification_id: str) -> Notification | None:
        return self._entries.get(notification_id)

    def active(self, owner_id: str) -> list[Notification]:
        """Unexpired notifications for one owner, oldest first."""
        now = time.monotonic()
        for note_id in [n.id for n in self._entries.values() if n.expires_at <= now]:
            self.hide(note_id)
        return [n for n in self._entries.values() if n.owner_id == owner_id]

    def clear(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
