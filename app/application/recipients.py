"""Expansion of principal employees into the set of notification recipients."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from uuid import UUID

from app.domain.entities import Employee, EmployeeWithDeputies, User
from app.domain.errors import InvalidAddressError

from .directory import EmployeeDirectory

logger = logging.getLogger(__name__)


def employee_to_user(employee: Employee) -> User:
    """Map a directory employee onto a notification addressee.

    Raises :class:`InvalidAddressError` when the employee has no email.
    """

    email = (employee.email or "").strip()
    if not email:
        raise InvalidAddressError(employee.id)
    return User(
        id=employee.id,
        name=employee.display_name,
        email=email,
        phone_number=employee.mobile_phone,
    )


def flatten_to_users(groups: Iterable[EmployeeWithDeputies]) -> list[User]:
    """Flatten ``groups`` in order, dropping duplicates and unaddressable members."""

    users: list[User] = []
    seen: set[UUID] = set()
    for group in groups:
        for member in group.members():
            if member.id in seen:
                continue
            seen.add(member.id)
            try:
                users.append(employee_to_user(member))
            except InvalidAddressError as exc:
                logger.warning("Recipient %s excluded: %s", member.id, exc)
    return users


class RecipientExpander:
    """Resolve employees and their active deputies against the directory.

    Deputy relations are looked up once per candidate; at most
    ``batch_size`` of those lookups are in flight at the same time.
    """

    def __init__(self, directory: EmployeeDirectory, *, batch_size: int = 20) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._directory = directory
        self._batch_size = batch_size

    async def expand(self, employee_ids: Iterable[UUID | None]) -> list[EmployeeWithDeputies]:
        ids = [employee_id for employee_id in dict.fromkeys(employee_ids) if employee_id]
        if not ids:
            return []

        candidates = self._order(await self._directory.get_employees_by_id(ids), ids)
        if not candidates:
            return []

        semaphore = asyncio.Semaphore(self._batch_size)

        async def fetch_relations(employee_id: UUID):
            async with semaphore:
                return await self._directory.get_deputies_for([employee_id])

        relation_groups = await asyncio.gather(
            *(fetch_relations(candidate.id) for candidate in candidates)
        )

        deputy_ids: dict[UUID, list[UUID]] = {}
        for candidate, relations in zip(candidates, relation_groups):
            grouped = deputy_ids.setdefault(candidate.id, [])
            for relation in relations:
                if relation.replaced_employee_id != candidate.id:
                    continue
                if relation.deputy_id == candidate.id or relation.deputy_id in grouped:
                    continue
                grouped.append(relation.deputy_id)

        wanted = list(dict.fromkeys(i for grouped in deputy_ids.values() for i in grouped))
        deputies: dict[UUID, Employee] = {}
        if wanted:
            deputies = {
                employee.id: employee
                for employee in await self._directory.get_employees_by_id(wanted)
            }

        return [
            EmployeeWithDeputies(
                employee=candidate,
                deputies=tuple(
                    deputies[deputy_id]
                    for deputy_id in deputy_ids[candidate.id]
                    if deputy_id in deputies
                ),
            )
            for candidate in candidates
        ]

    async def expand_users(
        self, employee_ids: Iterable[UUID | None], *, include_deputies: bool = True
    ) -> list[User]:
        """Return deduplicated recipients for ``employee_ids``."""

        if include_deputies:
            return flatten_to_users(await self.expand(employee_ids))

        ids = [employee_id for employee_id in dict.fromkeys(employee_ids) if employee_id]
        if not ids:
            return []
        employees = self._order(await self._directory.get_employees_by_id(ids), ids)
        return flatten_to_users(EmployeeWithDeputies(employee) for employee in employees)

    @staticmethod
    def _order(employees: Sequence[Employee], ids: Sequence[UUID]) -> list[Employee]:
        by_id = {employee.id: employee for employee in employees}
        return [by_id[employee_id] for employee_id in ids if employee_id in by_id]


__all__ = ["RecipientExpander", "employee_to_user", "flatten_to_users"]
