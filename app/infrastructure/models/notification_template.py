"""SQLAlchemy model for notification templates."""

from sqlalchemy import Column, DateTime, JSON, String

from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class NotificationTemplateModel(Base):
    """Template subject and per-channel bodies keyed by template name."""

    __tablename__ = "notification_template"

    name = Column(String(100), primary_key=True)
    subject = Column(String(255), nullable=False, default="")
    contents = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, default=now_in_app_naive_datetime)
    updated_at = Column(DateTime, nullable=True, onupdate=now_in_app_naive_datetime)


__all__ = ["NotificationTemplateModel"]
