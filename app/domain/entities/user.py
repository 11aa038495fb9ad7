"""Domain entity representing a notification addressee."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class User:
    """Identity used to address notifications on every channel."""

    id: UUID
    name: str
    email: str
    phone_number: str | None = None
    device_token: str | None = None
    created_at: datetime | None = None


__all__ = ["User"]
