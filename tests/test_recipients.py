"""Tests for recipient expansion through the employee directory."""

from __future__ import annotations

from uuid import uuid4

import pytest

from app.application.recipients import RecipientExpander, employee_to_user
from app.domain.errors import InvalidAddressError

from support import make_employee


@pytest.mark.anyio
async def test_employee_without_deputies_yields_identity(employees):
    performer = make_employee("Ivan")
    employees.add(performer)

    groups = await RecipientExpander(employees).expand([performer.id])

    assert len(groups) == 1
    assert groups[0].employee == performer
    assert groups[0].deputies == ()


@pytest.mark.anyio
async def test_deputies_are_joined_and_deduplicated(employees):
    performer = make_employee("Ivan")
    other = make_employee("Olga")
    first, second = make_employee("Petr"), make_employee("Anna")
    employees.add(performer, other)
    employees.add_deputy(performer, first)
    employees.add_deputy(performer, second)
    employees.add_deputy(other, first)

    users = await RecipientExpander(employees).expand_users([performer.id, other.id])

    assert [user.id for user in users] == [performer.id, first.id, second.id, other.id]
    assert users[0].email == "ivan@example.com"


@pytest.mark.anyio
async def test_deputy_records_are_fetched_in_one_batch(employees):
    performer = make_employee("Ivan")
    employees.add(performer)
    employees.add_deputy(performer, make_employee("Petr"))
    employees.add_deputy(performer, make_employee("Anna"))

    await RecipientExpander(employees).expand([performer.id])

    # one call for candidates, one for all deputies
    assert len(employees.employee_calls) == 2
    assert len(employees.employee_calls[1]) == 2
    assert employees.deputy_calls == [[performer.id]]


@pytest.mark.anyio
async def test_absent_ids_contribute_nothing(employees):
    performer = make_employee("Ivan")
    employees.add(performer)

    users = await RecipientExpander(employees).expand_users([uuid4(), performer.id, None])

    assert [user.id for user in users] == [performer.id]


@pytest.mark.anyio
async def test_members_without_email_are_excluded(employees, caplog):
    performer = make_employee("Ivan", email=None)
    deputy = make_employee("Petr")
    employees.add(performer)
    employees.add_deputy(performer, deputy)

    with caplog.at_level("WARNING"):
        users = await RecipientExpander(employees).expand_users([performer.id])

    assert [user.id for user in users] == [deputy.id]
    assert str(performer.id) in caplog.text


@pytest.mark.anyio
async def test_deputies_can_be_left_out(employees):
    performer = make_employee("Ivan")
    employees.add(performer)
    employees.add_deputy(performer, make_employee("Petr"))

    users = await RecipientExpander(employees).expand_users(
        [performer.id], include_deputies=False
    )

    assert [user.id for user in users] == [performer.id]
    assert employees.deputy_calls == []


@pytest.mark.anyio
async def test_deputy_lookups_respect_the_concurrency_cap(employees):
    candidates = [make_employee(f"Employee{i}") for i in range(10)]
    employees.add(*candidates)
    employees.delay = 0.01

    await RecipientExpander(employees, batch_size=3).expand([c.id for c in candidates])

    assert len(employees.deputy_calls) == 10
    assert 1 < employees.max_in_flight <= 3


def test_employee_to_user_requires_email():
    with pytest.raises(InvalidAddressError):
        employee_to_user(make_employee("Ivan", email="  "))


def test_batch_size_must_be_positive(employees):
    with pytest.raises(ValueError):
        RecipientExpander(employees, batch_size=0)
