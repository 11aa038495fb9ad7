"""SQLAlchemy models mirroring the document-management directory."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid

from app.infrastructure.database import Base


class EmployeeModel(Base):
    """Directory employee; ``email`` may be empty for unreachable accounts."""

    __tablename__ = "employee"

    id = Column(Uuid, primary_key=True)
    display_name = Column(String(200), nullable=False)
    email = Column(String(254), nullable=True)
    mobile_phone = Column(String(32), nullable=True)


class EmployeeDeputyModel(Base):
    """Deputy assignment, active between ``starts_at`` and ``ends_at``."""

    __tablename__ = "employee_deputy"

    replaced_employee_id = Column(
        Uuid, ForeignKey("employee.id"), primary_key=True, index=True
    )
    deputy_id = Column(Uuid, ForeignKey("employee.id"), primary_key=True)
    starts_at = Column(DateTime, nullable=True)
    ends_at = Column(DateTime, nullable=True)


class TaskModel(Base):
    """Workflow task referenced by task routes."""

    __tablename__ = "task"

    id = Column(Uuid, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    task_type_name = Column(String(100), nullable=False)
    author_id = Column(Uuid, ForeignKey("employee.id"), nullable=False)
    current_performer_id = Column(Uuid, ForeignKey("employee.id"), nullable=False)
    created_at = Column(DateTime, nullable=False)
    planned_completion_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)


__all__ = ["EmployeeDeputyModel", "EmployeeModel", "TaskModel"]
