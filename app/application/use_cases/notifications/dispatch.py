"""Turn a route request into persisted notifications and channel deliveries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from anyio import to_thread
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.application.delivery import DeliveryChannel
from app.application.registry import RouteRegistry
from app.application.rendering import TemplateRenderer
from app.domain.entities import (
    Channel,
    ChannelDelivery,
    MAX_TITLE_LENGTH,
    Notification,
    NotificationRequest,
    NotificationStatus,
    NotificationTemplate,
    RenderedContent,
    RouteConfiguration,
    User,
)
from app.domain.errors import NotificationServiceError, TemplateNotFoundError
from app.infrastructure.database import session_scope
from app.infrastructure.repositories import (
    NotificationRepository,
    TemplateRepository,
    UserRoutePreferenceRepository,
)
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class DispatchStage(str, Enum):
    """Last stage a dispatch reached; reported when it fails."""

    RECEIVED = "received"
    ROUTE_RESOLVED = "route_resolved"
    RECIPIENTS_RESOLVED = "recipients_resolved"
    CONTENT_RENDERED = "content_rendered"
    PERSISTED = "persisted"
    CHANNELS_DISPATCHED = "channels_dispatched"
    COMPLETED = "completed"


@dataclass
class DispatchResult:
    route: str
    created_at: datetime
    notifications: list[Notification] = field(default_factory=list)
    recipients: list[User] = field(default_factory=list)

    @property
    def created_ids(self) -> list[UUID]:
        return [notification.id for notification in self.notifications]

    @property
    def id(self) -> UUID | None:
        return self.notifications[0].id if self.notifications else None

    @property
    def title(self) -> str | None:
        return self.notifications[0].title if self.notifications else None

    @property
    def message(self) -> str | None:
        return self.notifications[0].message if self.notifications else None


class NotificationDispatcher:
    """Run the dispatch pipeline for every incoming :class:`NotificationRequest`.

    Notifications are committed before any channel is attempted, so a channel
    failure never loses the stored record. Channel outcomes are written back
    to each notification once all its channels have finished.
    """

    def __init__(
        self,
        registry: RouteRegistry,
        *,
        session_factory: sessionmaker[Session],
        channels: Mapping[Channel, DeliveryChannel],
        renderer: TemplateRenderer | None = None,
        default_channels: Sequence[Channel] = (Channel.IN_APP, Channel.EMAIL),
    ) -> None:
        self._registry = registry
        self._session_factory = session_factory
        self._channels = dict(channels)
        self._renderer = renderer or TemplateRenderer()
        self._default_channels = tuple(default_channels)

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    async def dispatch(self, request: NotificationRequest) -> DispatchResult:
        stage = DispatchStage.RECEIVED
        try:
            entry = self._registry.lookup(request.route)
            configuration = entry.configuration
            template = await to_thread.run_sync(
                self._load_template, configuration.template_name
            )
            stage = DispatchStage.ROUTE_RESOLVED

            recipients, data = await asyncio.gather(
                entry.resolver.resolve_recipients(request),
                entry.resolver.resolve_template_data(request),
            )
            recipients = await self._filter_by_preferences(
                _unique_recipients(recipients), configuration.name
            )
            stage = DispatchStage.RECIPIENTS_RESOLVED

            created_at = now_in_app_timezone()
            if not recipients:
                logger.info("Route %s resolved no recipients; nothing to send", request.route)
                return DispatchResult(route=configuration.name, created_at=created_at)

            channels = self._requested_channels(request)
            contents = self._render(template, data, channels, recipients, configuration)
            stage = DispatchStage.CONTENT_RENDERED

            template_data = _jsonable(dict(data))
            notifications = [
                self._build_notification(
                    request,
                    configuration,
                    recipient,
                    contents[recipient.id],
                    template_data,
                    created_at,
                )
                for recipient in recipients
            ]
            await to_thread.run_sync(self._persist, notifications)
            stage = DispatchStage.PERSISTED

            await asyncio.gather(
                *(
                    self._deliver(notification, channels, contents[notification.recipient_id])
                    for notification in notifications
                )
            )
            stage = DispatchStage.CHANNELS_DISPATCHED

            logger.info(
                "Route %s dispatched %d notification(s) over %s",
                configuration.name,
                len(notifications),
                ", ".join(channel.value for channel in channels) or "no channel",
            )
            stage = DispatchStage.COMPLETED
            return DispatchResult(
                route=configuration.name,
                created_at=created_at,
                notifications=notifications,
                recipients=list(recipients),
            )
        except NotificationServiceError as exc:
            logger.warning(
                "Dispatch of route %s failed after stage %s: %s",
                request.route,
                stage.value,
                exc,
            )
            raise
        except Exception:
            logger.exception(
                "Dispatch of route %s failed after stage %s", request.route, stage.value
            )
            raise

    def _load_template(self, name: str) -> NotificationTemplate:
        with session_scope(self._session_factory) as session:
            template = TemplateRepository(session).get_by_name(name)
        if template is None:
            raise TemplateNotFoundError(name)
        return template

    async def _filter_by_preferences(
        self, recipients: list[User], route: str
    ) -> list[User]:
        if not recipients:
            return recipients
        try:
            disabled = await to_thread.run_sync(
                self._disabled_user_ids, [recipient.id for recipient in recipients], route
            )
        except SQLAlchemyError as exc:
            logger.warning(
                "Route preferences unavailable, notifying every recipient of %s: %s",
                route,
                exc,
            )
            return recipients
        return [recipient for recipient in recipients if recipient.id not in disabled]

    def _disabled_user_ids(self, user_ids: list[UUID], route: str) -> set[UUID]:
        with session_scope(self._session_factory) as session:
            return UserRoutePreferenceRepository(session).disabled_user_ids(user_ids, route)

    def _requested_channels(self, request: NotificationRequest) -> tuple[Channel, ...]:
        return tuple(dict.fromkeys(request.channels or self._default_channels))

    def _render(
        self,
        template: NotificationTemplate,
        data: Mapping[str, Any],
        channels: Sequence[Channel],
        recipients: Sequence[User],
        configuration: RouteConfiguration,
    ) -> dict[UUID, dict[Channel, RenderedContent]]:
        """Render every requested channel, once or once per recipient."""

        wanted = list(channels)
        if Channel.IN_APP not in wanted and template.content_for(Channel.IN_APP) is not None:
            wanted.append(Channel.IN_APP)

        if not configuration.per_recipient_content:
            shared = self._renderer.render_all(template, data, wanted)
            return {recipient.id: shared for recipient in recipients}

        return {
            recipient.id: self._renderer.render_all(
                template, {**data, "recipient": _recipient_variables(recipient)}, wanted
            )
            for recipient in recipients
        }

    @staticmethod
    def _build_notification(
        request: NotificationRequest,
        configuration: RouteConfiguration,
        recipient: User,
        contents: Mapping[Channel, RenderedContent],
        template_data: dict[str, Any],
        created_at: datetime,
    ) -> Notification:
        subject = next(
            (content.subject for content in contents.values() if content.subject), ""
        )
        in_app = contents.get(Channel.IN_APP)
        fallback = in_app or next(iter(contents.values()), None)
        return Notification(
            id=uuid4(),
            title=_clip(request.title or subject or configuration.display_name),
            message=request.message or (fallback.body if fallback else ""),
            route=configuration.name,
            recipient=recipient,
            template_name=configuration.template_name,
            template_data=template_data,
            created_at=created_at,
            status=NotificationStatus.PENDING,
        )

    def _persist(self, notifications: Sequence[Notification]) -> None:
        with session_scope(self._session_factory) as session:
            NotificationRepository(session).create_many(notifications)

    async def _deliver(
        self,
        notification: Notification,
        channels: Sequence[Channel],
        contents: Mapping[Channel, RenderedContent],
    ) -> None:
        async def attempt(channel: Channel) -> ChannelDelivery:
            adapter = self._channels.get(channel)
            if adapter is None:
                logger.warning("Channel %s is not configured", channel.value)
                return ChannelDelivery(
                    channel, NotificationStatus.FAILED, "channel not configured"
                )
            try:
                return await adapter.deliver(notification, contents[channel])
            except Exception as exc:
                logger.exception(
                    "Channel %s failed for notification %s", channel.value, notification.id
                )
                return ChannelDelivery(channel, NotificationStatus.FAILED, str(exc))

        outcomes = await asyncio.gather(*(attempt(channel) for channel in channels))
        notification.record_deliveries(outcomes)
        try:
            await to_thread.run_sync(self._save_delivery, notification)
        except SQLAlchemyError:
            logger.exception(
                "Could not record delivery status of notification %s", notification.id
            )

    def _save_delivery(self, notification: Notification) -> None:
        with session_scope(self._session_factory) as session:
            NotificationRepository(session).save_delivery(notification)


def _unique_recipients(recipients: Iterable[User]) -> list[User]:
    unique: dict[UUID, User] = {}
    for recipient in recipients:
        unique.setdefault(recipient.id, recipient)
    return list(unique.values())


def _clip(title: str) -> str:
    if len(title) <= MAX_TITLE_LENGTH:
        return title
    return title[: MAX_TITLE_LENGTH - 1].rstrip() + "…"


def _recipient_variables(recipient: User) -> dict[str, Any]:
    return {"id": str(recipient.id), "name": recipient.name, "email": recipient.email}


def _jsonable(value: Any) -> Any:
    """Return ``value`` with dates, UUIDs and decimals turned into JSON scalars."""

    if isinstance(value, Mapping):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    return value


__all__ = ["DispatchResult", "DispatchStage", "NotificationDispatcher"]
