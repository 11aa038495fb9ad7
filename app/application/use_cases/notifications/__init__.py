"""Notification use cases: dispatch, queries and retention cleanup."""

from .cleanup import NotificationCleanupService
from .dispatch import DispatchResult, DispatchStage, NotificationDispatcher
from .queries import (
    get_notification,
    list_notifications_by_status,
    list_user_notifications,
    mark_notifications_read,
    search_notifications,
)

__all__ = [
    "DispatchResult",
    "DispatchStage",
    "NotificationCleanupService",
    "NotificationDispatcher",
    "get_notification",
    "list_notifications_by_status",
    "list_user_notifications",
    "mark_notifications_read",
    "search_notifications",
]
