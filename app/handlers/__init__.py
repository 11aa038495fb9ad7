"""Static table of the notification routes served by the application."""

from app.application.registry import RouteDefinition

from .demo import (
    ORDER_CREATED_CONFIG,
    TASK_ASSIGNED_CONFIG,
    USER_REGISTERED_CONFIG,
    build_order_created_resolver,
    build_task_assigned_resolver,
    build_user_registered_resolver,
)
from .object_kinds import DOCUMENT, ORDER, TASK, USER
from .tasks import (
    TASK_COMPLETED_CONFIG,
    TASK_CREATED_CONFIG,
    build_task_completed_resolver,
    build_task_created_resolver,
)

ROUTE_DEFINITIONS: tuple[RouteDefinition, ...] = (
    RouteDefinition(TASK_CREATED_CONFIG, build_task_created_resolver),
    RouteDefinition(TASK_COMPLETED_CONFIG, build_task_completed_resolver),
    RouteDefinition(TASK_ASSIGNED_CONFIG, build_task_assigned_resolver),
    RouteDefinition(ORDER_CREATED_CONFIG, build_order_created_resolver),
    RouteDefinition(USER_REGISTERED_CONFIG, build_user_registered_resolver),
)

OBJECT_KINDS = (TASK, DOCUMENT, ORDER, USER)

__all__ = ["OBJECT_KINDS", "ROUTE_DEFINITIONS"]
