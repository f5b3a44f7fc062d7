"""Notification endpoints.

Endpoints:
    GET    /api/v1/notifications       - Active notifications for the caller
    DELETE /api/v1/notifications/{id}  - Dismiss a notification
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from draftboard.api.dependencies import get_notification_center
from draftboard.auth.context import OwnerContext
from draftboard.auth.dependencies import get_owner_context
from draftboard.notifications import NotificationCenter

router = APIRouter(prefix="/notifications", tags=["notifications"])


class NotificationResponse(BaseModel):
    """A single notification."""

    id: str
    message: str
    type: str
    duration_ms: int
    created_at: str


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    owner: OwnerContext = Depends(get_owner_context),
    center: NotificationCenter = Depends(get_notification_center),
) -> list[NotificationResponse]:
    """Unexpired notifications for the caller, oldest first."""
    return [NotificationResponse(**n.to_dict()) for n in center.active(owner.owner_id)]


@router.delete("/{notification_id}")
async def dismiss_notification(
    notification_id: str,
    owner: OwnerContext = Depends(get_owner_context),
    center: NotificationCenter = Depends(get_notification_center),
) -> dict[str, bool]:
    """Dismiss one of the caller's notifications."""
    note = center.get(notification_id)
    if note is None or note.owner_id != owner.owner_id:
        raise HTTPException(status_code=404, detail="Notification not found")
    center.hide(notification_id)
    return {"dismissed": True}
