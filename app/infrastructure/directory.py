"""Directory adapters reading the mirrored directory tables."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from uuid import UUID

from anyio import to_thread
from sqlalchemy.orm import Session, sessionmaker

from app.domain.entities import DeputyRelation, Employee, Task, User
from app.utils import now_in_app_timezone

from .database import session_scope
from .repositories import EmployeeRepository, TaskRepository, UserRepository


class SqlEmployeeDirectory:
    """Employees and their deputy assignments, looked up on the worker pool."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def get_employees_by_id(self, employee_ids: Iterable[UUID]) -> Sequence[Employee]:
        ids = list(employee_ids)
        return await to_thread.run_sync(self._get_employees, ids)

    async def get_deputies_for(self, employee_ids: Iterable[UUID]) -> Sequence[DeputyRelation]:
        ids = list(employee_ids)
        return await to_thread.run_sync(self._get_deputies, ids)

    def _get_employees(self, ids: list[UUID]) -> Sequence[Employee]:
        with session_scope(self._session_factory) as session:
            return EmployeeRepository(session).get_by_ids(ids)

    def _get_deputies(self, ids: list[UUID]) -> Sequence[DeputyRelation]:
        with session_scope(self._session_factory) as session:
            return EmployeeRepository(session).list_active_deputies(
                ids, at=now_in_app_timezone()
            )


class SqlTaskDirectory:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def get_task(self, task_id: UUID) -> Task | None:
        return await to_thread.run_sync(self._get_task, task_id)

    def _get_task(self, task_id: UUID) -> Task | None:
        with session_scope(self._session_factory) as session:
            return TaskRepository(session).get(task_id)


class SqlUserDirectory:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    async def get_user(self, user_id: UUID) -> User | None:
        return await to_thread.run_sync(self._get_user, user_id)

    def _get_user(self, user_id: UUID) -> User | None:
        with session_scope(self._session_factory) as session:
            return UserRepository(session).get(user_id)


__all__ = ["SqlEmployeeDirectory", "SqlTaskDirectory", "SqlUserDirectory"]
