"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import Field, field_validator
from pydantic.alias_generators import to_snake

from app.domain.entities import (
    MAX_PAGE_SIZE,
    FilterLogic,
    FilterOperator,
    NotificationQuery,
    QueryFilter,
    SortOption,
)

from .base import CamelModel
from .user import UserSummaryRead


class NotificationMarkReadRequest(CamelModel):
    """Payload used to mark a batch of notifications as read."""

    user_id: UUID
    ids: list[UUID] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[UUID]:
        return list(dict.fromkeys(self.ids))


class NotificationMarkReadResponse(CamelModel):
    updated: int


class ChannelDeliveryRead(CamelModel):
    channel: str
    status: str
    error: str | None = None


class NotificationRead(CamelModel):
    """Representation of a notification delivered to the client."""

    id: UUID
    user_id: UUID
    route: str
    title: str
    message: str
    status: str
    deliveries: list[ChannelDeliveryRead] = Field(default_factory=list)
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    read_at: datetime | None = None


class QueryFilterIn(CamelModel):
    field: str = Field(..., min_length=1)
    operator: FilterOperator = FilterOperator.EQUALS
    value: Any = None
    logic: FilterLogic = FilterLogic.AND

    @field_validator("operator", "logic", mode="before")
    @classmethod
    def _normalize_name(cls, value: Any) -> Any:
        # accepts "GreaterThan", "greaterThan" and "greater_than"
        return to_snake(value.strip()) if isinstance(value, str) else value


class SortOptionIn(CamelModel):
    field: str = Field(..., min_length=1)
    direction: Literal["asc", "desc"] = "asc"

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip().lower()
            return {"ascending": "asc", "descending": "desc"}.get(value, value)
        return value


class NotificationSearchRequest(CamelModel):
    """Field/operator filters, sort order and paging for ``POST /notification/search``."""

    filters: list[QueryFilterIn] = Field(default_factory=list)
    sort: list[SortOptionIn] = Field(default_factory=list)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)
    include_total_count: bool = True

    def to_query(self) -> NotificationQuery:
        return NotificationQuery(
            filters=tuple(
                QueryFilter(
                    field=item.field,
                    value=item.value,
                    operator=item.operator,
                    logic=item.logic,
                )
                for item in self.filters
            ),
            sort=tuple(
                SortOption(field=item.field, descending=item.direction == "desc")
                for item in self.sort
            ),
            page=self.page,
            page_size=self.page_size,
            include_total_count=self.include_total_count,
        )


class NotificationPageRead(CamelModel):
    items: list[NotificationRead] = Field(default_factory=list)
    page: int
    page_size: int
    total_count: int | None = None
    total_pages: int | None = None


class NotificationDispatchResponse(CamelModel):
    """Result of raising a route: every recipient gets its own notification."""

    id: UUID | None = None
    title: str | None = None
    message: str | None = None
    route: str
    created_at: datetime
    recipients: list[UserSummaryRead] = Field(default_factory=list)
    created_notification_ids: list[UUID] = Field(default_factory=list)


class BroadcastRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    payload: dict[str, Any] = Field(default_factory=dict)


class BroadcastResponse(CamelModel):
    delivered: int


__all__ = [
    "BroadcastRequest",
    "BroadcastResponse",
    "ChannelDeliveryRead",
    "NotificationDispatchResponse",
    "NotificationMarkReadRequest",
    "NotificationMarkReadResponse",
    "NotificationPageRead",
    "NotificationRead",
    "NotificationSearchRequest",
    "QueryFilterIn",
    "SortOptionIn",
]
