"""Domain entity representing a per-channel notification template."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .notification import Channel


@dataclass(frozen=True)
class RenderedContent:
    """Channel-ready output of a template."""

    subject: str
    body: str


@dataclass
class NotificationTemplate:
    """Subject plus one body template per delivery channel."""

    name: str
    subject: str
    contents: dict[Channel, str] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def content_for(self, channel: Channel) -> str | None:
        return self.contents.get(channel)


__all__ = ["NotificationTemplate", "RenderedContent"]
