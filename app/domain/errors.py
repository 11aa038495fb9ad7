"""Error taxonomy shared by the dispatch pipeline."""

from __future__ import annotations


class NotificationServiceError(Exception):
    """Base class for every error raised by the notification core."""


class RegistryConfigurationError(NotificationServiceError):
    """The static route table is inconsistent; raised while the app boots."""


class RouteNotFoundError(NotificationServiceError):
    """No configuration/resolver pair is registered for the requested route."""

    def __init__(self, route: str, detail: str | None = None) -> None:
        super().__init__(detail or f"Route '{route}' is not registered")
        self.route = route


class MissingParameterError(NotificationServiceError):
    """A parameter required by the route resolver is absent or malformed."""

    def __init__(self, route: str, fields: list[str] | tuple[str, ...]) -> None:
        names = ", ".join(fields) or "parameters"
        super().__init__(f"Route '{route}' requires: {names}")
        self.route = route
        self.fields = list(fields)


class UpstreamLookupError(NotificationServiceError):
    """An entity referenced by the request could not be found by a collaborator."""

    def __init__(self, kind: str, identifier: object) -> None:
        super().__init__(f"{kind} '{identifier}' was not found")
        self.kind = kind
        self.identifier = identifier


class InvalidAddressError(NotificationServiceError):
    """A resolved identity lacks the contact data needed to address it."""

    def __init__(self, identifier: object, field: str = "email") -> None:
        super().__init__(f"Identity '{identifier}' has no {field}")
        self.identifier = identifier
        self.field = field


class TemplateNotFoundError(NotificationServiceError):
    """The template named by a route configuration does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Template '{name}' not found")
        self.name = name


class RenderError(NotificationServiceError):
    """A template could not be rendered with the resolver data."""

    def __init__(self, template_name: str, detail: str) -> None:
        super().__init__(f"Template '{template_name}' failed to render: {detail}")
        self.template_name = template_name


class PersistenceError(NotificationServiceError):
    """Notifications could not be stored; nothing was committed."""


class NotificationNotFoundError(NotificationServiceError):
    def __init__(self, notification_id: object) -> None:
        super().__init__(f"Notification '{notification_id}' not found")
        self.notification_id = notification_id


__all__ = [
    "NotificationServiceError",
    "RegistryConfigurationError",
    "RouteNotFoundError",
    "MissingParameterError",
    "UpstreamLookupError",
    "InvalidAddressError",
    "TemplateNotFoundError",
    "RenderError",
    "PersistenceError",
    "NotificationNotFoundError",
]
