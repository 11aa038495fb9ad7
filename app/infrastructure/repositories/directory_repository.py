"""Read access to the mirrored document-management directory."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.domain.entities import DeputyRelation, Employee, Task
from app.infrastructure.models import EmployeeDeputyModel, EmployeeModel, TaskModel
from app.utils import ensure_app_naive_datetime, ensure_app_timezone


class EmployeeRepository:
    """Batch lookups of employees and of their deputy assignments."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_ids(self, employee_ids: Iterable[UUID]) -> Sequence[Employee]:
        ids = list(dict.fromkeys(employee_ids))
        if not ids:
            return []
        models = self.session.query(EmployeeModel).filter(EmployeeModel.id.in_(ids)).all()
        return [self._to_entity(model) for model in models]

    def list_active_deputies(
        self, employee_ids: Iterable[UUID], *, at: datetime
    ) -> Sequence[DeputyRelation]:
        ids = list(dict.fromkeys(employee_ids))
        if not ids:
            return []
        moment = ensure_app_naive_datetime(at)
        query = (
            self.session.query(EmployeeDeputyModel)
            .filter(EmployeeDeputyModel.replaced_employee_id.in_(ids))
            .filter(
                or_(
                    EmployeeDeputyModel.starts_at.is_(None),
                    EmployeeDeputyModel.starts_at <= moment,
                )
            )
            .filter(
                or_(
                    EmployeeDeputyModel.ends_at.is_(None),
                    EmployeeDeputyModel.ends_at > moment,
                )
            )
            .order_by(EmployeeDeputyModel.replaced_employee_id, EmployeeDeputyModel.deputy_id)
        )
        return [
            DeputyRelation(
                replaced_employee_id=model.replaced_employee_id,
                deputy_id=model.deputy_id,
                starts_at=ensure_app_timezone(model.starts_at),
                ends_at=ensure_app_timezone(model.ends_at),
            )
            for model in query.all()
        ]

    @staticmethod
    def _to_entity(model: EmployeeModel) -> Employee:
        return Employee(
            id=model.id,
            display_name=model.display_name,
            email=model.email,
            mobile_phone=model.mobile_phone,
        )


class TaskRepository:
    """Lookup of workflow tasks by id."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, task_id: UUID) -> Task | None:
        model = self.session.get(TaskModel, task_id)
        if model is None:
            return None
        return Task(
            id=model.id,
            title=model.title,
            description=model.description,
            task_type_name=model.task_type_name,
            author_id=model.author_id,
            current_performer_id=model.current_performer_id,
            created_at=ensure_app_timezone(model.created_at),
            planned_completion_at=ensure_app_timezone(model.planned_completion_at),
            completed_at=ensure_app_timezone(model.completed_at),
        )


__all__ = ["EmployeeRepository", "TaskRepository"]
