"""Aggregate application use cases."""

from .preferences import list_route_preferences, update_route_preferences
from .users import create_user, get_user, list_users

__all__ = [
    "create_user",
    "get_user",
    "list_route_preferences",
    "list_users",
    "update_route_preferences",
]
