"""SQLAlchemy model for per-user route preferences."""

from sqlalchemy import Boolean, Column, ForeignKey, String, UniqueConstraint, Uuid

from app.infrastructure.database import Base


class UserRoutePreferenceModel(Base):
    """Whether ``user_id`` receives notifications raised on ``route``."""

    __tablename__ = "user_route_preference"
    __table_args__ = (
        UniqueConstraint("user_id", "route", name="uq_user_route_preference"),
    )

    id = Column(Uuid, primary_key=True)
    user_id = Column(Uuid, ForeignKey("user.id"), nullable=False, index=True)
    route = Column(String(100), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)


__all__ = ["UserRoutePreferenceModel"]
