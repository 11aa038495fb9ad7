"""Persistence layer for per-user route preferences."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from uuid import UUID, uuid4

from sqlalchemy.orm import Session

from app.domain.entities import UserRoutePreference
from app.infrastructure.models import UserRoutePreferenceModel


class UserRoutePreferenceRepository:
    """Store opt-outs; a missing row means the route is enabled."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list_for_user(self, user_id: UUID) -> Sequence[UserRoutePreference]:
        query = (
            self.session.query(UserRoutePreferenceModel)
            .filter(UserRoutePreferenceModel.user_id == user_id)
            .order_by(UserRoutePreferenceModel.route)
        )
        return [self._to_entity(model) for model in query.all()]

    def disabled_user_ids(self, user_ids: Iterable[UUID], route: str) -> set[UUID]:
        """Return which of ``user_ids`` explicitly turned ``route`` off."""

        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return set()
        rows = (
            self.session.query(UserRoutePreferenceModel.user_id)
            .filter(
                UserRoutePreferenceModel.user_id.in_(ids),
                UserRoutePreferenceModel.route == route,
                UserRoutePreferenceModel.enabled.is_(False),
            )
            .all()
        )
        return {user_id for (user_id,) in rows}

    def set_preferences(
        self, user_id: UUID, preferences: Iterable[tuple[str, bool]]
    ) -> Sequence[UserRoutePreference]:
        """Upsert ``(route, enabled)`` pairs for ``user_id`` in one transaction."""

        existing = {
            model.route: model
            for model in self.session.query(UserRoutePreferenceModel)
            .filter(UserRoutePreferenceModel.user_id == user_id)
            .all()
        }
        for route, enabled in preferences:
            model = existing.get(route)
            if model is None:
                model = UserRoutePreferenceModel(id=uuid4(), user_id=user_id, route=route)
                self.session.add(model)
                existing[route] = model
            model.enabled = enabled
        self.session.commit()
        return self.list_for_user(user_id)

    @staticmethod
    def _to_entity(model: UserRoutePreferenceModel) -> UserRoutePreference:
        return UserRoutePreference(
            id=model.id,
            user_id=model.user_id,
            route=model.route,
            enabled=bool(model.enabled),
        )


__all__ = ["UserRoutePreferenceRepository"]
