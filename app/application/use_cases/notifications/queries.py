"""Read and acknowledge stored notifications."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from app.domain.entities import (
    Notification,
    NotificationQuery,
    NotificationStatus,
    Page,
    QueryFilter,
)
from app.domain.errors import NotificationNotFoundError
from app.infrastructure.repositories import NotificationRepository


def get_notification(session: Session, notification_id: UUID) -> Notification:
    notification = NotificationRepository(session).get(notification_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    return notification


def list_user_notifications(
    session: Session,
    user_id: UUID,
    *,
    unread_only: bool = False,
    page: int = 1,
    page_size: int = 50,
) -> Page[Notification]:
    """Return one page of the notifications addressed to ``user_id``, newest first."""

    filters = [QueryFilter("user_id", user_id)]
    if unread_only:
        filters.append(QueryFilter("read_at", None))
    query = NotificationQuery(filters=tuple(filters), page=page, page_size=page_size)
    return NotificationRepository(session).search(query)


def search_notifications(session: Session, query: NotificationQuery) -> Page[Notification]:
    return NotificationRepository(session).search(query)


def list_notifications_by_status(
    session: Session, status: str, *, limit: int = 100
) -> Sequence[Notification]:
    """Return notifications in ``status``; unknown names raise ``ValueError``."""

    try:
        parsed = NotificationStatus(status.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(item.value for item in NotificationStatus)
        raise ValueError(f"Unknown status '{status}'. Expected one of: {allowed}") from exc
    return NotificationRepository(session).list_by_status(parsed, limit=limit)


def mark_notifications_read(
    session: Session, user_id: UUID, notification_ids: Iterable[UUID]
) -> int:
    return NotificationRepository(session).mark_as_read(notification_ids, user_id=user_id)


__all__ = [
    "get_notification",
    "list_notifications_by_status",
    "list_user_notifications",
    "mark_notifications_read",
    "search_notifications",
]
