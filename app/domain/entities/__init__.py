"""Domain entities exposed by the application."""

from .employee import DeputyRelation, Employee, EmployeeWithDeputies, Task
from .notification import (
    Channel,
    ChannelDelivery,
    MAX_TITLE_LENGTH,
    Notification,
    NotificationStatus,
    aggregate_status,
)
from .notification_query import (
    MAX_PAGE_SIZE,
    FilterLogic,
    FilterOperator,
    NotificationQuery,
    Page,
    QueryFilter,
    SortOption,
)
from .notification_request import NotificationRequest
from .notification_template import NotificationTemplate, RenderedContent
from .route import ObjectKind, RouteConfiguration
from .user import User
from .user_route_preference import UserRoutePreference

__all__ = [
    "Channel",
    "ChannelDelivery",
    "DeputyRelation",
    "Employee",
    "EmployeeWithDeputies",
    "FilterLogic",
    "FilterOperator",
    "MAX_PAGE_SIZE",
    "MAX_TITLE_LENGTH",
    "Notification",
    "NotificationQuery",
    "NotificationRequest",
    "NotificationStatus",
    "NotificationTemplate",
    "ObjectKind",
    "Page",
    "QueryFilter",
    "RenderedContent",
    "RouteConfiguration",
    "SortOption",
    "Task",
    "User",
    "UserRoutePreference",
    "aggregate_status",
]
