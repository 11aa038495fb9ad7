"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Column, DateTime, ForeignKey, JSON, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.domain.entities import MAX_TITLE_LENGTH
from app.infrastructure.database import Base
from app.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for routed notifications."""

    __tablename__ = "notification"

    id = Column(Uuid, primary_key=True)
    user_id = Column(Uuid, ForeignKey("user.id"), nullable=False, index=True)
    route = Column(String(100), nullable=False, index=True)
    title = Column(String(MAX_TITLE_LENGTH), nullable=False)
    message = Column(Text, nullable=False)
    template_name = Column(String(100), nullable=True)
    template_data = Column(JSON, nullable=False, default=dict)
    status = Column(String(20), nullable=False, default="pending", index=True)
    deliveries = Column(JSON, nullable=False, default=list)
    created_at = Column(
        DateTime(), nullable=False, default=now_in_app_naive_datetime, index=True
    )
    read_at = Column(DateTime(), nullable=True)

    user = relationship("UserModel", lazy="joined")


__all__ = ["NotificationModel"]
