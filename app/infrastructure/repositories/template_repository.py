"""Persistence layer for notification templates."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Channel, NotificationTemplate
from app.infrastructure.models import NotificationTemplateModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone


class TemplateRepository:
    """Provide CRUD operations for :class:`NotificationTemplate` objects."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def list(self) -> Sequence[NotificationTemplate]:
        query = self.session.query(NotificationTemplateModel).order_by(
            NotificationTemplateModel.name
        )
        return [self._to_entity(model) for model in query.all()]

    def get_by_name(self, name: str) -> NotificationTemplate | None:
        model = self.session.get(NotificationTemplateModel, name)
        return self._to_entity(model) if model else None

    def exists(self, name: str) -> bool:
        return self.session.get(NotificationTemplateModel, name) is not None

    def create(self, template: NotificationTemplate) -> NotificationTemplate:
        model = NotificationTemplateModel(name=template.name)
        self._apply_entity_to_model(model, template)
        if template.created_at is not None:
            model.created_at = ensure_app_naive_datetime(template.created_at)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def update(self, template: NotificationTemplate) -> NotificationTemplate:
        model = self.session.get(NotificationTemplateModel, template.name)
        if model is None:
            msg = f"Template {template.name} not found"
            raise ValueError(msg)
        self._apply_entity_to_model(model, template)
        if template.updated_at is not None:
            model.updated_at = ensure_app_naive_datetime(template.updated_at)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationTemplateModel, template: NotificationTemplate
    ) -> None:
        model.subject = template.subject
        model.contents = {
            channel.value: content for channel, content in template.contents.items()
        }

    @staticmethod
    def _to_entity(model: NotificationTemplateModel) -> NotificationTemplate:
        contents: dict[Channel, str] = {}
        for key, value in (model.contents or {}).items():
            try:
                contents[Channel(key)] = value
            except ValueError:
                continue
        return NotificationTemplate(
            name=model.name,
            subject=model.subject or "",
            contents=contents,
            created_at=ensure_app_timezone(model.created_at),
            updated_at=ensure_app_timezone(model.updated_at),
        )


__all__ = ["TemplateRepository"]
