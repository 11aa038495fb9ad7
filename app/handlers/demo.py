"""Demonstration routes addressed to users of the local user store."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.application.directory import UserDirectory
from app.application.registry import RouteDependencies
from app.application.resolvers import decode_parameters
from app.domain.entities import NotificationRequest, RouteConfiguration, User
from app.domain.errors import UpstreamLookupError
from app.utils import now_in_app_timezone

from .object_kinds import ORDER, TASK, USER

TASK_ASSIGNED = "TaskAssigned"
ORDER_CREATED = "OrderCreated"
USER_REGISTERED = "UserRegistered"

SYSTEM_ASSIGNER = "System"


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskAssignedParameters(_Payload):
    assignee_id: UUID
    assigner_id: UUID | None = None
    task_title: str | None = None
    task_description: str | None = None
    priority: str | None = None
    due_date: datetime | None = None


class OrderCreatedParameters(_Payload):
    customer_id: UUID
    order_number: str | None = None
    order_total: Decimal | None = None
    item_count: int | None = None


class UserRegisteredParameters(_Payload):
    user_id: UUID
    welcome_message: str | None = None


async def _single_user(users: UserDirectory, user_id: UUID) -> list[User]:
    user = await users.get_user(user_id)
    return [user] if user is not None else []


async def _require_user(users: UserDirectory, user_id: UUID) -> User:
    user = await users.get_user(user_id)
    if user is None:
        raise UpstreamLookupError("User", user_id)
    return user


class TaskAssignedResolver:
    route = TASK_ASSIGNED

    def __init__(self, users: UserDirectory) -> None:
        self._users = users

    async def resolve_recipients(self, request: NotificationRequest) -> Sequence[User]:
        parameters = decode_parameters(request, TaskAssignedParameters)
        return await _single_user(self._users, parameters.assignee_id)

    async def resolve_template_data(self, request: NotificationRequest) -> Mapping[str, Any]:
        parameters = decode_parameters(request, TaskAssignedParameters)
        assignee = await _require_user(self._users, parameters.assignee_id)
        assigner = (
            await self._users.get_user(parameters.assigner_id)
            if parameters.assigner_id
            else None
        )
        now = now_in_app_timezone()
        return {
            "assignee_name": assignee.name,
            "assigner_name": assigner.name if assigner else SYSTEM_ASSIGNER,
            "task_title": parameters.task_title or "Untitled task",
            "task_description": parameters.task_description or "",
            "priority": parameters.priority or "Normal",
            "due_date": parameters.due_date or now + timedelta(days=7),
            "assigned_date": now,
        }


class OrderCreatedResolver:
    route = ORDER_CREATED

    def __init__(self, users: UserDirectory) -> None:
        self._users = users

    async def resolve_recipients(self, request: NotificationRequest) -> Sequence[User]:
        parameters = decode_parameters(request, OrderCreatedParameters)
        return await _single_user(self._users, parameters.customer_id)

    async def resolve_template_data(self, request: NotificationRequest) -> Mapping[str, Any]:
        parameters = decode_parameters(request, OrderCreatedParameters)
        customer = await _require_user(self._users, parameters.customer_id)
        now = now_in_app_timezone()
        return {
            "customer_name": customer.name,
            "order_number": parameters.order_number or "N/A",
            "order_total": float(parameters.order_total or 0),
            "item_count": parameters.item_count or 0,
            "order_date": now,
            "estimated_delivery": now + timedelta(days=3),
        }


class UserRegisteredResolver:
    route = USER_REGISTERED

    def __init__(self, users: UserDirectory) -> None:
        self._users = users

    async def resolve_recipients(self, request: NotificationRequest) -> Sequence[User]:
        parameters = decode_parameters(request, UserRegisteredParameters)
        return await _single_user(self._users, parameters.user_id)

    async def resolve_template_data(self, request: NotificationRequest) -> Mapping[str, Any]:
        parameters = decode_parameters(request, UserRegisteredParameters)
        user = await _require_user(self._users, parameters.user_id)
        return {
            "user_name": user.name,
            "user_email": user.email,
            "registration_date": user.created_at or now_in_app_timezone(),
            "welcome_message": parameters.welcome_message or "Welcome to our service!",
        }


TASK_ASSIGNED_CONFIG = RouteConfiguration(
    name=TASK_ASSIGNED,
    object_kind=TASK,
    template_name=TASK_ASSIGNED,
    display_name="Task Assigned",
    description="Notification sent when a task is assigned to a user",
    payload_type=TaskAssignedParameters,
    tags=frozenset({"task", "assignment", "work"}),
    icon="bookmark-check",
)

ORDER_CREATED_CONFIG = RouteConfiguration(
    name=ORDER_CREATED,
    object_kind=ORDER,
    template_name=ORDER_CREATED,
    display_name="Order Created",
    description="Notification sent when a new order is created",
    payload_type=OrderCreatedParameters,
    tags=frozenset({"order", "purchase", "confirmation"}),
    icon="shopping-cart",
)

USER_REGISTERED_CONFIG = RouteConfiguration(
    name=USER_REGISTERED,
    object_kind=USER,
    template_name=USER_REGISTERED,
    display_name="User Registration",
    description="Notification sent when a new user registers",
    payload_type=UserRegisteredParameters,
    tags=frozenset({"user", "registration", "welcome"}),
    icon="user",
)


def build_task_assigned_resolver(deps: RouteDependencies) -> TaskAssignedResolver:
    return TaskAssignedResolver(deps.users)


def build_order_created_resolver(deps: RouteDependencies) -> OrderCreatedResolver:
    return OrderCreatedResolver(deps.users)


def build_user_registered_resolver(deps: RouteDependencies) -> UserRegisteredResolver:
    return UserRegisteredResolver(deps.users)


__all__ = [
    "ORDER_CREATED_CONFIG",
    "TASK_ASSIGNED_CONFIG",
    "USER_REGISTERED_CONFIG",
    "OrderCreatedResolver",
    "TaskAssignedResolver",
    "UserRegisteredResolver",
    "build_order_created_resolver",
    "build_task_assigned_resolver",
    "build_user_registered_resolver",
]
