"""Domain entity representing a persisted notification."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable
from uuid import UUID

from .user import User

MAX_TITLE_LENGTH = 255


class Channel(str, Enum):
    """Delivery mechanisms a notification can be sent through."""

    IN_APP = "in_app"
    EMAIL = "email"


class NotificationStatus(str, Enum):
    """Lifecycle of a notification and of each channel attempt."""

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass
class ChannelDelivery:
    """Outcome of one channel attempt for a notification."""

    channel: Channel
    status: NotificationStatus = NotificationStatus.PENDING
    error: str | None = None


@dataclass
class Notification:
    """Message addressed to one recipient as a result of a route request."""

    id: UUID
    title: str
    message: str
    route: str
    recipient: User
    template_name: str | None = None
    template_data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    status: NotificationStatus = NotificationStatus.PENDING
    deliveries: list[ChannelDelivery] = field(default_factory=list)
    read_at: datetime | None = None

    @property
    def recipient_id(self) -> UUID:
        return self.recipient.id

    def record_deliveries(self, deliveries: Iterable[ChannelDelivery]) -> None:
        """Store channel outcomes and derive the aggregate status from them."""

        self.deliveries = list(deliveries)
        self.status = aggregate_status(delivery.status for delivery in self.deliveries)


def aggregate_status(outcomes: Iterable[NotificationStatus]) -> NotificationStatus:
    """Collapse per-channel outcomes into the notification status.

    ``Delivered`` wins over ``Sent``; only when every attempted channel failed
    is the notification ``Failed``. Without attempts it stays ``Pending``.
    """

    attempted = [outcome for outcome in outcomes if outcome != NotificationStatus.PENDING]
    if not attempted:
        return NotificationStatus.PENDING
    if NotificationStatus.DELIVERED in attempted:
        return NotificationStatus.DELIVERED
    if NotificationStatus.SENT in attempted:
        return NotificationStatus.SENT
    return NotificationStatus.FAILED


__all__ = [
    "Channel",
    "ChannelDelivery",
    "MAX_TITLE_LENGTH",
    "Notification",
    "NotificationStatus",
    "aggregate_status",
]
