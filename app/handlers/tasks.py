"""Routes raised by workflow tasks of the document-management system."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.application.directory import EmployeeDirectory, TaskDirectory
from app.application.recipients import RecipientExpander
from app.application.registry import RouteDependencies
from app.application.resolvers import decode_parameters
from app.domain.entities import NotificationRequest, RouteConfiguration, Task, User
from app.domain.errors import UpstreamLookupError

from .object_kinds import TASK

TASK_CREATED = "TaskCreated"
TASK_COMPLETED = "TaskCompleted"


class TaskParameters(BaseModel):
    """Payload of every task route: ``{"taskId": "<uuid>"}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    task_id: UUID


class TaskTemplateData(BaseModel):
    author_name: str
    executor_name: str
    task_subject: str
    task_description: str = ""
    task_type: str
    due_date: datetime | None = None
    completion_date: datetime | None = None
    created_date: datetime


def extract_task_parameters(request: NotificationRequest) -> TaskParameters:
    return decode_parameters(request, TaskParameters)


async def load_task(tasks: TaskDirectory, request: NotificationRequest) -> Task:
    parameters = extract_task_parameters(request)
    task = await tasks.get_task(parameters.task_id)
    if task is None:
        raise UpstreamLookupError("Task", parameters.task_id)
    return task


async def build_task_template_data(
    task: Task, employees: EmployeeDirectory
) -> Mapping[str, Any]:
    """Resolve author and performer names and assemble the template variables."""

    found = {
        employee.id: employee
        for employee in await employees.get_employees_by_id(
            [task.author_id, task.current_performer_id]
        )
    }
    for employee_id in (task.author_id, task.current_performer_id):
        if employee_id not in found:
            raise UpstreamLookupError("Employee", employee_id)

    return TaskTemplateData(
        author_name=found[task.author_id].display_name,
        executor_name=found[task.current_performer_id].display_name,
        task_subject=task.title,
        task_description=task.description or "",
        task_type=task.task_type_name,
        due_date=task.planned_completion_at,
        completion_date=task.completed_at,
        created_date=task.created_at,
    ).model_dump()


class TaskCreatedResolver:
    """Address the current performer of a newly created or delegated task."""

    route = TASK_CREATED

    def __init__(
        self,
        tasks: TaskDirectory,
        employees: EmployeeDirectory,
        recipients: RecipientExpander,
        *,
        include_deputies: bool,
    ) -> None:
        self._tasks = tasks
        self._employees = employees
        self._recipients = recipients
        self._include_deputies = include_deputies

    async def resolve_recipients(self, request: NotificationRequest) -> Sequence[User]:
        task = await load_task(self._tasks, request)
        return await self._recipients.expand_users(
            [task.current_performer_id], include_deputies=self._include_deputies
        )

    async def resolve_template_data(self, request: NotificationRequest) -> Mapping[str, Any]:
        task = await load_task(self._tasks, request)
        return await build_task_template_data(task, self._employees)


class TaskCompletedResolver:
    """Address the author of a task once the performer completed it."""

    route = TASK_COMPLETED

    def __init__(
        self,
        tasks: TaskDirectory,
        employees: EmployeeDirectory,
        recipients: RecipientExpander,
        *,
        include_deputies: bool,
    ) -> None:
        self._tasks = tasks
        self._employees = employees
        self._recipients = recipients
        self._include_deputies = include_deputies

    async def resolve_recipients(self, request: NotificationRequest) -> Sequence[User]:
        task = await load_task(self._tasks, request)
        return await self._recipients.expand_users(
            [task.author_id], include_deputies=self._include_deputies
        )

    async def resolve_template_data(self, request: NotificationRequest) -> Mapping[str, Any]:
        task = await load_task(self._tasks, request)
        return await build_task_template_data(task, self._employees)


TASK_CREATED_CONFIG = RouteConfiguration(
    name=TASK_CREATED,
    object_kind=TASK,
    template_name=TASK_CREATED,
    display_name="New task for the performer",
    description=(
        "Sent to the performer when a task is created, delegated or returned "
        "from delegation"
    ),
    payload_type=TaskParameters,
    tags=frozenset({"Task", "Deputy notification"}),
    include_deputies=True,
    icon="clipboard-list",
)

TASK_COMPLETED_CONFIG = RouteConfiguration(
    name=TASK_COMPLETED,
    object_kind=TASK,
    template_name=TASK_COMPLETED,
    display_name="Task completed",
    description="Sent to the task author when the performer completes the task",
    payload_type=TaskParameters,
    tags=frozenset({"Task", "Deputy notification"}),
    include_deputies=True,
    icon="clipboard-check",
)


def build_task_created_resolver(deps: RouteDependencies) -> TaskCreatedResolver:
    return TaskCreatedResolver(
        deps.tasks,
        deps.employees,
        deps.recipients,
        include_deputies=TASK_CREATED_CONFIG.include_deputies,
    )


def build_task_completed_resolver(deps: RouteDependencies) -> TaskCompletedResolver:
    return TaskCompletedResolver(
        deps.tasks,
        deps.employees,
        deps.recipients,
        include_deputies=TASK_COMPLETED_CONFIG.include_deputies,
    )


__all__ = [
    "TASK_COMPLETED_CONFIG",
    "TASK_CREATED_CONFIG",
    "TaskCompletedResolver",
    "TaskCreatedResolver",
    "TaskParameters",
    "TaskTemplateData",
    "build_task_completed_resolver",
    "build_task_created_resolver",
    "build_task_template_data",
    "extract_task_parameters",
    "load_task",
]
