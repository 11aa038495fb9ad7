"""Domain entity storing whether a user wants a route's notifications."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass
class UserRoutePreference:
    """Opt-in/opt-out flag, unique per ``(user_id, route)``."""

    id: UUID | None
    user_id: UUID
    route: str
    enabled: bool = True


__all__ = ["UserRoutePreference"]
