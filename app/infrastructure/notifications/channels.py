"""Delivery channel adapters used by the dispatcher."""

from __future__ import annotations

import logging

from anyio import to_thread

from app.domain.entities import (
    Channel,
    ChannelDelivery,
    Notification,
    NotificationStatus,
    RenderedContent,
)
from app.infrastructure.email import EmailTransport

from .publisher import NotificationPublisher

logger = logging.getLogger(__name__)


class InAppChannel:
    """Push to the recipient's open websocket sessions; offline users get nothing."""

    channel = Channel.IN_APP

    def __init__(self, publisher: NotificationPublisher) -> None:
        self._publisher = publisher

    async def deliver(
        self, notification: Notification, content: RenderedContent
    ) -> ChannelDelivery:
        sessions = await self._publisher.push_to_user(notification.recipient_id, notification)
        logger.debug(
            "Notification %s pushed to %d session(s) of user %s",
            notification.id,
            sessions,
            notification.recipient_id,
        )
        return ChannelDelivery(self.channel, NotificationStatus.DELIVERED)


class EmailChannel:
    """Send the rendered email body through an :class:`EmailTransport`."""

    channel = Channel.EMAIL

    def __init__(self, transport: EmailTransport) -> None:
        self._transport = transport

    async def deliver(
        self, notification: Notification, content: RenderedContent
    ) -> ChannelDelivery:
        address = notification.recipient.email
        if not address:
            return ChannelDelivery(self.channel, NotificationStatus.FAILED, "recipient has no email")

        subject = content.subject or notification.title
        try:
            accepted = await to_thread.run_sync(
                self._transport.send, address, subject, content.body
            )
        except Exception as exc:
            logger.error("Email for notification %s failed: %s", notification.id, exc)
            return ChannelDelivery(self.channel, NotificationStatus.FAILED, str(exc))

        if not accepted:
            logger.warning("Email provider rejected notification %s", notification.id)
            return ChannelDelivery(
                self.channel, NotificationStatus.FAILED, "email provider rejected the message"
            )
        return ChannelDelivery(self.channel, NotificationStatus.SENT)


__all__ = ["EmailChannel", "InAppChannel"]
