"""Persistence layer for notification addressees."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from uuid import UUID

from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.models import UserModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone


class UserRepository:
    """Provide CRUD operations for :class:`User` entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self, skip: int = 0, limit: int = 100) -> Sequence[User]:
        query = (
            self.session.query(UserModel)
            .order_by(UserModel.name, UserModel.id)
            .offset(skip)
            .limit(limit)
        )
        return [self._to_entity(model) for model in query.all()]

    def get(self, user_id: UUID) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = (
            self.session.query(UserModel)
            .filter(UserModel.email == email)
            .first()
        )
        return self._to_entity(model) if model else None

    def get_map_by_ids(self, user_ids: Iterable[UUID]) -> dict[UUID, User]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}
        models = self.session.query(UserModel).filter(UserModel.id.in_(ids)).all()
        return {model.id: self._to_entity(model) for model in models}

    def create(self, user: User) -> User:
        model = UserModel()
        self._apply_entity_to_model(model, user)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def stage_upsert(self, users: Iterable[User]) -> None:
        """Add or refresh ``users`` in the current transaction without committing."""

        for user in users:
            self.stage(user)

    def stage(self, user: User) -> None:
        model = self.session.get(UserModel, user.id)
        if model is None:
            model = UserModel()
            self.session.add(model)
        self._apply_entity_to_model(model, user)

    @staticmethod
    def _apply_entity_to_model(model: UserModel, user: User) -> None:
        model.id = user.id
        model.name = user.name
        model.email = user.email
        model.phone_number = user.phone_number
        model.device_token = user.device_token
        if user.created_at is not None:
            model.created_at = ensure_app_naive_datetime(user.created_at)

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            phone_number=model.phone_number,
            device_token=model.device_token,
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["UserRepository"]
