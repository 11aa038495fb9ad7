"""Use cases for managing users."""

from .create_user import create_user
from .get_user import get_user
from .list_users import list_users

__all__ = ["create_user", "get_user", "list_users"]
