"""Contract of the adapters that hand a notification to a delivery channel."""

from __future__ import annotations

from typing import Protocol

from app.domain.entities import Channel, ChannelDelivery, Notification, RenderedContent


class DeliveryChannel(Protocol):
    """Delivers one notification; failures are reported in the returned outcome."""

    channel: Channel

    async def deliver(
        self, notification: Notification, content: RenderedContent
    ) -> ChannelDelivery:
        ...


__all__ = ["DeliveryChannel"]
