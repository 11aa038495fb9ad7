"""SQLAlchemy model for the user table."""

from sqlalchemy import Column, DateTime, String, Uuid

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class UserModel(Base):
    """Database representation of a notification addressee."""

    __tablename__ = "user"

    id = Column(Uuid, primary_key=True)
    name = Column(String(200), nullable=False)
    email = Column(String(254), nullable=False, index=True)
    phone_number = Column(String(32), nullable=True)
    device_token = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)


__all__ = ["UserModel"]
