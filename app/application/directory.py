"""Contracts of the upstream systems the resolvers read from."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol
from uuid import UUID

from app.domain.entities import DeputyRelation, Employee, Task, User


class EmployeeDirectory(Protocol):
    """Employee records and deputy assignments of the document-management system."""

    async def get_employees_by_id(self, employee_ids: Iterable[UUID]) -> Sequence[Employee]:
        """Return the employees found for ``employee_ids``; unknown ids are skipped."""

    async def get_deputies_for(self, employee_ids: Iterable[UUID]) -> Sequence[DeputyRelation]:
        """Return the deputy relations active now for ``employee_ids``."""


class TaskDirectory(Protocol):
    async def get_task(self, task_id: UUID) -> Task | None:
        """Return the task or ``None`` when it does not exist."""


class UserDirectory(Protocol):
    async def get_user(self, user_id: UUID) -> User | None:
        """Return a registered user or ``None``."""


__all__ = ["EmployeeDirectory", "TaskDirectory", "UserDirectory"]
