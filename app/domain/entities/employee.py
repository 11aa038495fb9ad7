"""Directory entities used while expanding recipients to their deputies."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Employee:
    """Person record held by the document-management directory."""

    id: UUID
    display_name: str
    email: str | None = None
    mobile_phone: str | None = None


@dataclass(frozen=True)
class DeputyRelation:
    """``deputy_id`` stands in for ``replaced_employee_id`` inside the window."""

    replaced_employee_id: UUID
    deputy_id: UUID
    starts_at: datetime | None = None
    ends_at: datetime | None = None

    def is_active(self, at: datetime) -> bool:
        if self.starts_at is not None and at < self.starts_at:
            return False
        if self.ends_at is not None and at >= self.ends_at:
            return False
        return True


@dataclass(frozen=True)
class EmployeeWithDeputies:
    """Transient pairing of an employee and the deputies acting for them."""

    employee: Employee
    deputies: tuple[Employee, ...] = field(default_factory=tuple)

    def members(self) -> tuple[Employee, ...]:
        return (self.employee, *self.deputies)


@dataclass(frozen=True)
class Task:
    """Workflow task as exposed by the document-management system."""

    id: UUID
    title: str
    author_id: UUID
    current_performer_id: UUID
    task_type_name: str
    created_at: datetime
    description: str | None = None
    planned_completion_at: datetime | None = None
    completed_at: datetime | None = None


__all__ = ["DeputyRelation", "Employee", "EmployeeWithDeputies", "Task"]
