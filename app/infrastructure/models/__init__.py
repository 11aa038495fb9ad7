"""ORM models used by the application infrastructure."""

from .directory import EmployeeDeputyModel, EmployeeModel, TaskModel
from .notification import NotificationModel
from .notification_template import NotificationTemplateModel
from .user import UserModel
from .user_route_preference import UserRoutePreferenceModel

__all__ = [
    "EmployeeDeputyModel",
    "EmployeeModel",
    "NotificationModel",
    "NotificationTemplateModel",
    "TaskModel",
    "UserModel",
    "UserRoutePreferenceModel",
]
