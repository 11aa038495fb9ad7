"""User schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from .base import CamelModel


class UserCreate(CamelModel):
    id: UUID | None = None
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone_number: str | None = Field(default=None, max_length=32)
    device_token: str | None = Field(default=None, max_length=255)


class UserSummaryRead(CamelModel):
    id: UUID
    name: str
    email: str


class UserRead(UserSummaryRead):
    phone_number: str | None = None
    device_token: str | None = None
    created_at: datetime | None = None


__all__ = ["UserCreate", "UserRead", "UserSummaryRead"]
