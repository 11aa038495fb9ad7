"""Per-user opt-in/opt-out of notification routes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.orm import Session

from app.application.registry import RouteRegistry
from app.domain.errors import RouteNotFoundError
from app.infrastructure.repositories import UserRoutePreferenceRepository


@dataclass(frozen=True)
class RoutePreferenceView:
    route: str
    display_name: str
    object_kind: str
    enabled: bool


def list_route_preferences(
    session: Session, registry: RouteRegistry, user_id: UUID
) -> list[RoutePreferenceView]:
    """Return every registered route with the user's choice, enabled by default."""

    stored = {
        preference.route: preference.enabled
        for preference in UserRoutePreferenceRepository(session).list_for_user(user_id)
    }
    return [
        RoutePreferenceView(
            route=configuration.name,
            display_name=configuration.display_name,
            object_kind=configuration.object_kind.name,
            enabled=stored.get(configuration.name, True),
        )
        for configuration in registry.configurations()
    ]


def update_route_preferences(
    session: Session,
    registry: RouteRegistry,
    user_id: UUID,
    preferences: Mapping[str, bool],
) -> list[RoutePreferenceView]:
    """Store the given route choices; unknown routes raise ``RouteNotFoundError``."""

    for route in preferences:
        if route not in registry:
            raise RouteNotFoundError(route)

    UserRoutePreferenceRepository(session).set_preferences(
        user_id, [(route, bool(enabled)) for route, enabled in preferences.items()]
    )
    return list_route_preferences(session, registry, user_id)


__all__ = ["RoutePreferenceView", "list_route_preferences", "update_route_preferences"]
