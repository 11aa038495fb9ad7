"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Any, Iterable
from uuid import UUID

from pydantic.alias_generators import to_snake
from sqlalchemy import ColumnElement, and_, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.entities import (
    Channel,
    ChannelDelivery,
    FilterLogic,
    FilterOperator,
    Notification,
    NotificationQuery,
    NotificationStatus,
    Page,
    QueryFilter,
    SortOption,
)
from app.domain.errors import PersistenceError
from app.infrastructure.models import NotificationModel
from app.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)

from .user_repository import UserRepository

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Provide CRUD operations for :class:`Notification` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, notification_id: UUID) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def search(self, query: NotificationQuery) -> Page[Notification]:
        """Filter, sort and page notifications; unknown fields raise ``ValueError``."""

        statement = self.session.query(NotificationModel)
        condition = _combine_filters(query.filters)
        if condition is not None:
            statement = statement.filter(condition)

        total = statement.count() if query.include_total_count else None
        models = (
            statement.order_by(*_sort_clauses(query.sort))
            .offset(query.offset)
            .limit(query.page_size)
            .all()
        )
        return Page(
            items=[self._to_entity(model) for model in models],
            page=query.page,
            page_size=query.page_size,
            total_count=total,
        )

    def list_by_status(
        self, status: NotificationStatus, *, limit: int | None = 100
    ) -> Sequence[Notification]:
        query = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.status == status.value)
            .order_by(NotificationModel.created_at.desc(), NotificationModel.id)
        )
        if limit is not None:
            query = query.limit(limit)
        return [self._to_entity(model) for model in query.all()]

    def count(self) -> int:
        return self.session.query(NotificationModel).count()

    def create_many(self, notifications: Sequence[Notification]) -> None:
        """Store recipients and notifications in a single transaction.

        Either every row is committed or none is; failures surface as
        :class:`PersistenceError`. A recipient inserted by a concurrent
        dispatch between our read and our commit makes the insert collide;
        the batch is then staged once more against the committed row.
        """

        recipients = list({n.recipient.id: n.recipient for n in notifications}.values())
        users = UserRepository(self.session)
        try:
            try:
                users.stage_upsert(recipients)
                self._stage_notifications(notifications)
                self.session.commit()
            except IntegrityError as exc:
                self.session.rollback()
                logger.info("Recipient rows changed concurrently, retrying: %s", exc.orig)
                for recipient in recipients:
                    users.stage(recipient)
                self._stage_notifications(notifications)
                self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise PersistenceError(f"Could not store notifications: {exc}") from exc

    def _stage_notifications(self, notifications: Sequence[Notification]) -> None:
        for notification in notifications:
            model = NotificationModel()
            self._apply_entity_to_model(model, notification)
            self.session.add(model)

    def save_delivery(self, notification: Notification) -> None:
        """Write the delivery outcome of ``notification`` back to its row."""

        if notification.id is None:
            raise ValueError("Notification id is required for updates")
        model = self.session.get(NotificationModel, notification.id)
        if model is None:
            msg = f"Notification with id {notification.id} not found"
            raise ValueError(msg)
        model.status = notification.status.value
        model.deliveries = self._serialize_deliveries(notification.deliveries)
        self.session.commit()

    def mark_as_read(self, notification_ids: Iterable[UUID], *, user_id: UUID) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        updated = (
            self.session.query(NotificationModel)
            .filter(
                NotificationModel.id.in_(ids),
                NotificationModel.user_id == user_id,
                NotificationModel.read_at.is_(None),
            )
            .update(
                {
                    NotificationModel.read_at: ensure_app_naive_datetime(
                        now_in_app_timezone()
                    )
                },
                synchronize_session=False,
            )
        )
        self.session.commit()
        return updated

    def delete_created_before(self, cutoff: datetime, *, limit: int) -> int:
        """Delete up to ``limit`` rows created strictly before ``cutoff``."""

        ids = [
            row_id
            for (row_id,) in self.session.query(NotificationModel.id)
            .filter(NotificationModel.created_at < cutoff)
            .order_by(NotificationModel.created_at)
            .limit(limit)
            .all()
        ]
        if not ids:
            return 0
        deleted = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.id.in_(ids))
            .delete(synchronize_session=False)
        )
        self.session.commit()
        return deleted

    @classmethod
    def _apply_entity_to_model(
        cls, model: NotificationModel, notification: Notification
    ) -> None:
        model.id = notification.id
        model.user_id = notification.recipient.id
        model.route = notification.route
        model.title = notification.title
        model.message = notification.message
        model.template_name = notification.template_name
        model.template_data = notification.template_data or {}
        model.status = notification.status.value
        model.deliveries = cls._serialize_deliveries(notification.deliveries)
        model.created_at = (
            ensure_app_naive_datetime(notification.created_at)
            or ensure_app_naive_datetime(now_in_app_timezone())
        )
        model.read_at = ensure_app_naive_datetime(notification.read_at)

    @staticmethod
    def _serialize_deliveries(deliveries: Iterable[ChannelDelivery]) -> list[dict]:
        return [
            {
                "channel": delivery.channel.value,
                "status": delivery.status.value,
                "error": delivery.error,
            }
            for delivery in deliveries
        ]

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        deliveries = [
            ChannelDelivery(
                channel=Channel(item["channel"]),
                status=NotificationStatus(item["status"]),
                error=item.get("error"),
            )
            for item in model.deliveries or []
        ]
        return Notification(
            id=model.id,
            title=model.title,
            message=model.message,
            route=model.route,
            recipient=UserRepository._to_entity(model.user),
            template_name=model.template_name,
            template_data=model.template_data or {},
            created_at=ensure_app_timezone(model.created_at),
            status=NotificationStatus(model.status),
            deliveries=deliveries,
            read_at=ensure_app_timezone(model.read_at),
        )


_SEARCH_COLUMNS = {
    "id": NotificationModel.id,
    "user_id": NotificationModel.user_id,
    "route": NotificationModel.route,
    "title": NotificationModel.title,
    "message": NotificationModel.message,
    "template_name": NotificationModel.template_name,
    "status": NotificationModel.status,
    "created_at": NotificationModel.created_at,
    "read_at": NotificationModel.read_at,
}
_UUID_FIELDS = {"id", "user_id"}
_DATETIME_FIELDS = {"created_at", "read_at"}
_TEXT_OPERATORS = {
    FilterOperator.CONTAINS,
    FilterOperator.STARTS_WITH,
    FilterOperator.ENDS_WITH,
}


def _resolve_field(name: str) -> tuple[str, Any]:
    key = to_snake(name.strip())
    column = _SEARCH_COLUMNS.get(key)
    if column is None:
        allowed = ", ".join(sorted(_SEARCH_COLUMNS))
        raise ValueError(f"Unknown notification field '{name}'. Expected one of: {allowed}")
    return key, column


def _coerce(key: str, value: Any) -> Any:
    if value is None:
        return None
    if key in _UUID_FIELDS:
        return value if isinstance(value, UUID) else UUID(str(value))
    if key in _DATETIME_FIELDS:
        if not isinstance(value, datetime):
            value = datetime.fromisoformat(str(value))
        return ensure_app_naive_datetime(value)
    if key == "status":
        return NotificationStatus(str(value).strip().lower()).value
    return str(value)


def _filter_condition(query_filter: QueryFilter) -> ColumnElement[bool]:
    key, column = _resolve_field(query_filter.field)
    operator = query_filter.operator
    value = query_filter.value

    if operator is FilterOperator.IN:
        if not isinstance(value, (list, tuple, set)):
            raise ValueError(f"Operator 'in' on '{query_filter.field}' needs a list value")
        return column.in_([_coerce(key, item) for item in value])

    if value is None:
        if operator is FilterOperator.EQUALS:
            return column.is_(None)
        if operator is FilterOperator.NOT_EQUALS:
            return column.is_not(None)
        raise ValueError(f"Operator '{operator.value}' on '{query_filter.field}' needs a value")

    if operator in _TEXT_OPERATORS:
        if key in _UUID_FIELDS or key in _DATETIME_FIELDS:
            raise ValueError(f"Operator '{operator.value}' only applies to text fields")
        text = str(value)
        if operator is FilterOperator.CONTAINS:
            return column.contains(text, autoescape=True)
        if operator is FilterOperator.STARTS_WITH:
            return column.startswith(text, autoescape=True)
        return column.endswith(text, autoescape=True)

    coerced = _coerce(key, value)
    comparisons = {
        FilterOperator.EQUALS: column.__eq__,
        FilterOperator.NOT_EQUALS: column.__ne__,
        FilterOperator.GREATER_THAN: column.__gt__,
        FilterOperator.GREATER_THAN_OR_EQUAL: column.__ge__,
        FilterOperator.LESS_THAN: column.__lt__,
        FilterOperator.LESS_THAN_OR_EQUAL: column.__le__,
    }
    return comparisons[operator](coerced)


def _combine_filters(filters: Iterable[QueryFilter]) -> ColumnElement[bool] | None:
    """Fold filters left to right; the first filter's logic is ignored."""

    condition: ColumnElement[bool] | None = None
    for query_filter in filters:
        try:
            clause = _filter_condition(query_filter)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid filter on '{query_filter.field}': {exc}") from exc
        if condition is None:
            condition = clause
        elif query_filter.logic is FilterLogic.OR:
            condition = or_(condition, clause)
        else:
            condition = and_(condition, clause)
    return condition


def _sort_clauses(options: Iterable[SortOption]) -> list[Any]:
    clauses = []
    for option in options:
        _, column = _resolve_field(option.field)
        clauses.append(column.desc() if option.descending else column.asc())
    if not clauses:
        clauses.append(NotificationModel.created_at.desc())
    clauses.append(NotificationModel.id)
    return clauses


__all__ = ["NotificationRepository"]
