"""Realtime and email delivery helpers for the infrastructure layer."""

from .channels import EmailChannel, InAppChannel
from .manager import NotificationConnectionManager, notification_manager
from .publisher import NotificationPublisher, serialize_notification

__all__ = [
    "EmailChannel",
    "InAppChannel",
    "NotificationConnectionManager",
    "notification_manager",
    "NotificationPublisher",
    "serialize_notification",
]
