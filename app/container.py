"""Wiring of the notification services used by the API and the scheduler."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.application.directory import EmployeeDirectory, TaskDirectory, UserDirectory
from app.application.recipients import RecipientExpander
from app.application.registry import RouteDefinition, RouteDependencies, RouteRegistry
from app.application.use_cases.notifications import (
    NotificationCleanupService,
    NotificationDispatcher,
)
from app.config import Settings, get_settings
from app.domain.entities import Channel
from app.handlers import ROUTE_DEFINITIONS
from app.infrastructure.database import SessionLocal
from app.infrastructure.directory import (
    SqlEmployeeDirectory,
    SqlTaskDirectory,
    SqlUserDirectory,
)
from app.infrastructure.email import EmailTransport, SendGridEmailTransport
from app.infrastructure.notifications import (
    EmailChannel,
    InAppChannel,
    NotificationConnectionManager,
    NotificationPublisher,
    notification_manager,
)
from app.infrastructure.scheduler import CleanupJob


@dataclass
class ServiceContainer:
    settings: Settings
    session_factory: sessionmaker[Session]
    registry: RouteRegistry
    dispatcher: NotificationDispatcher
    manager: NotificationConnectionManager
    publisher: NotificationPublisher
    cleanup_service: NotificationCleanupService
    cleanup_job: CleanupJob

    @property
    def engine(self) -> Engine:
        return self.session_factory.kw["bind"]


def build_container(
    settings: Settings | None = None,
    *,
    session_factory: sessionmaker[Session] | None = None,
    employees: EmployeeDirectory | None = None,
    tasks: TaskDirectory | None = None,
    users: UserDirectory | None = None,
    email_transport: EmailTransport | None = None,
    manager: NotificationConnectionManager | None = None,
    definitions: Iterable[RouteDefinition] | None = None,
) -> ServiceContainer:
    """Build every service; the route registry is validated here and fails fast."""

    settings = settings or get_settings()
    session_factory = session_factory or SessionLocal
    manager = manager or notification_manager

    employees = employees or SqlEmployeeDirectory(session_factory)
    dependencies = RouteDependencies(
        employees=employees,
        tasks=tasks or SqlTaskDirectory(session_factory),
        users=users or SqlUserDirectory(session_factory),
        recipients=RecipientExpander(employees, batch_size=settings.directory_batch_size),
    )
    registry = RouteRegistry.from_definitions(
        ROUTE_DEFINITIONS if definitions is None else definitions, dependencies
    )

    publisher = NotificationPublisher(manager)
    dispatcher = NotificationDispatcher(
        registry,
        session_factory=session_factory,
        channels={
            Channel.IN_APP: InAppChannel(publisher),
            Channel.EMAIL: EmailChannel(email_transport or SendGridEmailTransport(settings)),
        },
        default_channels=parse_channels(settings.default_channel_names()),
    )

    cleanup_service = NotificationCleanupService(
        session_factory, batch_size=settings.notification_cleanup_batch_size
    )
    cleanup_job = CleanupJob(
        cleanup_service, retention_days=settings.notification_retention_days
    )
    return ServiceContainer(
        settings=settings,
        session_factory=session_factory,
        registry=registry,
        dispatcher=dispatcher,
        manager=manager,
        publisher=publisher,
        cleanup_service=cleanup_service,
        cleanup_job=cleanup_job,
    )


def parse_channels(names: Iterable[str]) -> tuple[Channel, ...]:
    """Convert channel names into :class:`Channel` values; unknown names raise."""

    channels: list[Channel] = []
    for name in names:
        try:
            channel = Channel(name.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(item.value for item in Channel)
            raise ValueError(f"Unknown channel '{name}'. Expected one of: {allowed}") from exc
        if channel not in channels:
            channels.append(channel)
    return tuple(channels)


__all__ = ["ServiceContainer", "build_container", "parse_channels"]
