"""Business object kinds notification routes are raised for."""

from app.domain.entities import ObjectKind

TASK = ObjectKind(name="Task", display_name="Tasks")
DOCUMENT = ObjectKind(name="Document", display_name="Documents")
ORDER = ObjectKind(name="Order", display_name="Orders")
USER = ObjectKind(name="User", display_name="Users")

__all__ = ["DOCUMENT", "ORDER", "TASK", "USER"]
