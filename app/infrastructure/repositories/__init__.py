"""Repository implementations for infrastructure layer."""

from .directory_repository import EmployeeRepository, TaskRepository
from .notification_repository import NotificationRepository
from .template_repository import TemplateRepository
from .user_repository import UserRepository
from .user_route_preference_repository import UserRoutePreferenceRepository

__all__ = [
    "EmployeeRepository",
    "NotificationRepository",
    "TaskRepository",
    "TemplateRepository",
    "UserRepository",
    "UserRoutePreferenceRepository",
]
