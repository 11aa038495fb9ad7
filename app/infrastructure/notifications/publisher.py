"""Push notifications to websocket subscribers."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from app.domain.entities import Notification

from .manager import NotificationConnectionManager


class NotificationPublisher:
    """Serialize notifications and hand them to the connection manager.

    Live pushes happen while the other channels are still running, so they
    carry no ``status``; clients read the final status from the backlog or
    the REST endpoints.
    """

    def __init__(self, manager: NotificationConnectionManager) -> None:
        self._manager = manager

    async def push_to_user(self, user_id: UUID, notification: Notification) -> int:
        message = {
            "type": "notification",
            "data": serialize_notification(notification, include_status=False),
        }
        return await self._manager.send_to_user(user_id, message)

    async def push_to_all(self, title: str, message: str, payload: dict[str, Any] | None = None) -> int:
        return await self._manager.broadcast(
            {
                "type": "broadcast",
                "data": {"title": title, "message": message, "payload": payload or {}},
            }
        )


def serialize_notification(
    notification: Notification, *, include_status: bool = True
) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    data = {
        "id": str(notification.id),
        "userId": str(notification.recipient_id),
        "route": notification.route,
        "title": notification.title,
        "message": notification.message,
        "payload": notification.template_data or {},
        "createdAt": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "readAt": notification.read_at.isoformat() if notification.read_at else None,
    }
    if include_status:
        data["status"] = notification.status.value
    return data


__all__ = ["NotificationPublisher", "serialize_notification"]
