"""Inbound request raised by a producer for a named route."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .notification import Channel


@dataclass(frozen=True)
class NotificationRequest:
    """Immutable request; ``parameters`` is only interpreted by the route resolver."""

    route: str
    parameters: Any = None
    title: str | None = None
    message: str | None = None
    channels: tuple[Channel, ...] = field(default_factory=tuple)


__all__ = ["NotificationRequest"]
