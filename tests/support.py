"""Hand-written collaborators used by the tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from uuid import UUID, uuid4

from app.domain.entities import DeputyRelation, Employee, Task, User


def make_employee(name: str, *, email: str | None = "default") -> Employee:
    address = f"{name.lower()}@example.com" if email == "default" else email
    return Employee(id=uuid4(), display_name=name, email=address)


def make_task(author: Employee, performer: Employee, **overrides) -> Task:
    values = {
        "id": uuid4(),
        "title": "Approve contract",
        "author_id": author.id,
        "current_performer_id": performer.id,
        "task_type_name": "Approval",
        "created_at": datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc),
        "description": "Please review the attached contract",
        "planned_completion_at": datetime(2024, 3, 5, 18, 0, tzinfo=timezone.utc),
    }
    values.update(overrides)
    return Task(**values)


class FakeEmployeeDirectory:
    """In-memory directory that records calls and deputy lookup concurrency."""

    def __init__(self) -> None:
        self.employees: dict[UUID, Employee] = {}
        self.relations: list[DeputyRelation] = []
        self.employee_calls: list[list[UUID]] = []
        self.deputy_calls: list[list[UUID]] = []
        self.delay = 0.0
        self.in_flight = 0
        self.max_in_flight = 0

    def add(self, *employees: Employee) -> None:
        for employee in employees:
            self.employees[employee.id] = employee

    def add_deputy(self, employee: Employee, deputy: Employee) -> None:
        self.add(deputy)
        self.relations.append(
            DeputyRelation(replaced_employee_id=employee.id, deputy_id=deputy.id)
        )

    async def get_employees_by_id(self, employee_ids):
        ids = list(employee_ids)
        self.employee_calls.append(ids)
        return [self.employees[i] for i in ids if i in self.employees]

    async def get_deputies_for(self, employee_ids):
        ids = list(employee_ids)
        self.deputy_calls.append(ids)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return [r for r in self.relations if r.replaced_employee_id in ids]
        finally:
            self.in_flight -= 1


class FakeTaskDirectory:
    def __init__(self) -> None:
        self.tasks: dict[UUID, Task] = {}

    def add(self, task: Task) -> Task:
        self.tasks[task.id] = task
        return task

    async def get_task(self, task_id):
        return self.tasks.get(task_id)


class FakeUserDirectory:
    def __init__(self) -> None:
        self.users: dict[UUID, User] = {}

    def add(self, user: User) -> User:
        self.users[user.id] = user
        return user

    async def get_user(self, user_id):
        return self.users.get(user_id)


class RecordingTransport:
    """Email transport that keeps every message and answers with ``result``."""

    def __init__(self, result: bool = True, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to: str, subject: str, body: str) -> bool:
        if self.error is not None:
            raise self.error
        self.sent.append((to, subject, body))
        return self.result
