"""End-to-end tests of the dispatch pipeline against a SQLite database."""

from __future__ import annotations

import asyncio
import threading
from dataclasses import replace
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from app.application.registry import RouteDefinition
from app.container import build_container
from app.domain.entities import (
    Channel,
    MAX_TITLE_LENGTH,
    NotificationRequest,
    NotificationStatus,
    NotificationTemplate,
    User,
)
from app.domain.errors import (
    MissingParameterError,
    PersistenceError,
    RouteNotFoundError,
    TemplateNotFoundError,
    UpstreamLookupError,
)
from app.handlers.tasks import TASK_CREATED_CONFIG, build_task_created_resolver
from app.infrastructure.database import session_scope
from app.infrastructure.notifications import NotificationConnectionManager
from app.infrastructure.repositories import (
    NotificationRepository,
    TemplateRepository,
    UserRepository,
    UserRoutePreferenceRepository,
)

from support import RecordingTransport, make_employee, make_task


@pytest.fixture
def build(settings, session_factory, employees, tasks, users, transport):
    def _build(**overrides):
        options = {
            "session_factory": session_factory,
            "employees": employees,
            "tasks": tasks,
            "users": users,
            "email_transport": transport,
            "manager": NotificationConnectionManager(),
        }
        options.update(overrides)
        return build_container(settings, **options)

    return _build


@pytest.fixture
def dispatcher(build):
    return build().dispatcher


def _task_world(employees, tasks, *, deputies: int = 0):
    author = make_employee("Author")
    performer = make_employee("Performer")
    employees.add(author, performer)
    deputy_records = [make_employee(f"Deputy{i}") for i in range(deputies)]
    for deputy in deputy_records:
        employees.add_deputy(performer, deputy)
    task = tasks.add(make_task(author, performer))
    return task, performer, deputy_records


def _task_request(task, **kwargs) -> NotificationRequest:
    return NotificationRequest(route="TaskCreated", parameters={"taskId": str(task.id)}, **kwargs)


def _count(session_factory) -> int:
    with session_scope(session_factory) as session:
        return NotificationRepository(session).count()


def _stored(session_factory, notification_id):
    with session_scope(session_factory) as session:
        return NotificationRepository(session).get(notification_id)


@pytest.mark.anyio
async def test_task_created_without_deputies(dispatcher, employees, tasks, transport, session_factory):
    task, performer, _ = _task_world(employees, tasks)

    result = await dispatcher.dispatch(_task_request(task))

    assert len(result.notifications) == 1
    assert [user.id for user in result.recipients] == [performer.id]
    notification = result.notifications[0]
    assert notification.title == "New task: Approve contract"
    assert notification.message == 'Author assigned "Approve contract" to Performer, due 05.03.2024.'
    assert notification.status == NotificationStatus.DELIVERED
    assert transport.sent[0][0] == "performer@example.com"
    assert transport.sent[0][1] == "New task: Approve contract"

    stored = _stored(session_factory, notification.id)
    assert stored.status == NotificationStatus.DELIVERED
    assert {d.channel: d.status for d in stored.deliveries} == {
        Channel.IN_APP: NotificationStatus.DELIVERED,
        Channel.EMAIL: NotificationStatus.SENT,
    }
    assert stored.template_data["task_subject"] == "Approve contract"
    assert stored.template_data["created_date"].startswith("2024-03-01")


@pytest.mark.anyio
async def test_task_created_with_two_deputies(dispatcher, employees, tasks, session_factory):
    task, performer, deputies = _task_world(employees, tasks, deputies=2)

    result = await dispatcher.dispatch(_task_request(task))

    assert [user.id for user in result.recipients] == [performer.id] + [d.id for d in deputies]
    assert len(set(result.created_ids)) == 3
    assert len({(n.title, n.message) for n in result.notifications}) == 1
    assert _count(session_factory) == 3
    with session_scope(session_factory) as session:
        assert len(UserRepository(session).get_map_by_ids(u.id for u in result.recipients)) == 3


@pytest.mark.anyio
async def test_unknown_route_has_no_side_effects(dispatcher, transport, session_factory):
    with pytest.raises(RouteNotFoundError):
        await dispatcher.dispatch(NotificationRequest(route="NoSuchRoute", parameters={}))

    assert _count(session_factory) == 0
    assert transport.sent == []


@pytest.mark.anyio
async def test_missing_task_id_is_reported(dispatcher, transport, session_factory):
    with pytest.raises(MissingParameterError) as excinfo:
        await dispatcher.dispatch(NotificationRequest(route="TaskCreated", parameters={}))

    assert excinfo.value.fields == ["taskId"]
    assert _count(session_factory) == 0
    assert transport.sent == []


@pytest.mark.anyio
async def test_parameters_may_arrive_as_json_text(dispatcher, employees, tasks):
    task, _, _ = _task_world(employees, tasks)

    result = await dispatcher.dispatch(
        NotificationRequest(route="TaskCreated", parameters=f'{{"taskId": "{task.id}"}}')
    )

    assert len(result.notifications) == 1


@pytest.mark.anyio
async def test_unknown_task_is_an_upstream_error(dispatcher, session_factory):
    with pytest.raises(UpstreamLookupError):
        await dispatcher.dispatch(
            NotificationRequest(route="TaskCreated", parameters={"taskId": str(uuid4())})
        )

    assert _count(session_factory) == 0


@pytest.mark.anyio
async def test_email_failure_keeps_in_app_delivery(build, employees, tasks, session_factory):
    dispatcher = build(email_transport=RecordingTransport(result=False)).dispatcher
    task, _, _ = _task_world(employees, tasks)

    result = await dispatcher.dispatch(_task_request(task))

    stored = _stored(session_factory, result.id)
    assert stored.status == NotificationStatus.DELIVERED
    email = next(d for d in stored.deliveries if d.channel == Channel.EMAIL)
    assert email.status == NotificationStatus.FAILED
    assert email.error


@pytest.mark.anyio
async def test_email_only_success_is_sent(dispatcher, employees, tasks, session_factory):
    task, _, _ = _task_world(employees, tasks)

    result = await dispatcher.dispatch(_task_request(task, channels=(Channel.EMAIL,)))

    stored = _stored(session_factory, result.id)
    assert stored.status == NotificationStatus.SENT
    assert [d.channel for d in stored.deliveries] == [Channel.EMAIL]


@pytest.mark.anyio
async def test_transport_exception_marks_notification_failed(build, employees, tasks, session_factory):
    dispatcher = build(email_transport=RecordingTransport(error=RuntimeError("smtp down"))).dispatcher
    task, _, _ = _task_world(employees, tasks)

    result = await dispatcher.dispatch(_task_request(task, channels=(Channel.EMAIL,)))

    stored = _stored(session_factory, result.id)
    assert stored.status == NotificationStatus.FAILED
    assert stored.deliveries[0].error == "smtp down"


@pytest.mark.anyio
async def test_request_message_overrides_rendered_body(dispatcher, employees, tasks):
    task, _, _ = _task_world(employees, tasks)

    result = await dispatcher.dispatch(_task_request(task, message="Please hurry"))

    assert result.message == "Please hurry"
    assert result.title == "New task: Approve contract"


@pytest.mark.anyio
async def test_disabled_preference_filters_recipient(dispatcher, employees, tasks, session_factory):
    task, performer, deputies = _task_world(employees, tasks, deputies=1)
    with session_scope(session_factory) as session:
        UserRoutePreferenceRepository(session).set_preferences(
            deputies[0].id, [("TaskCreated", False)]
        )

    result = await dispatcher.dispatch(_task_request(task))

    assert [user.id for user in result.recipients] == [performer.id]
    assert _count(session_factory) == 1


@pytest.mark.anyio
async def test_preference_outage_fails_open(dispatcher, employees, tasks, monkeypatch, caplog):
    task, _, deputies = _task_world(employees, tasks, deputies=1)

    def unavailable(self, user_ids, route):
        raise OperationalError("SELECT", {}, Exception("database is down"))

    monkeypatch.setattr(UserRoutePreferenceRepository, "disabled_user_ids", unavailable)

    with caplog.at_level("WARNING"):
        result = await dispatcher.dispatch(_task_request(task))

    assert len(result.notifications) == 2
    assert "preferences unavailable" in caplog.text


@pytest.mark.anyio
async def test_unknown_performer_is_an_upstream_error(dispatcher, employees, tasks, session_factory):
    author = make_employee("Author")
    employees.add(author)
    task = tasks.add(make_task(author, make_employee("Ghost")))

    with pytest.raises(UpstreamLookupError, match="Employee"):
        await dispatcher.dispatch(_task_request(task))

    assert _count(session_factory) == 0


@pytest.mark.anyio
async def test_unaddressable_recipient_yields_no_notification(dispatcher, employees, tasks, session_factory):
    author = make_employee("Author")
    performer = make_employee("Performer", email=None)
    employees.add(author, performer)
    task = tasks.add(make_task(author, performer))

    result = await dispatcher.dispatch(_task_request(task))

    assert result.notifications == []
    assert result.id is None
    assert _count(session_factory) == 0


@pytest.mark.anyio
async def test_missing_template_is_reported(build, employees, tasks, session_factory):
    definition = RouteDefinition(
        replace(TASK_CREATED_CONFIG, template_name="Missing"), build_task_created_resolver
    )
    dispatcher = build(definitions=[definition]).dispatcher
    task, _, _ = _task_world(employees, tasks)

    with pytest.raises(TemplateNotFoundError):
        await dispatcher.dispatch(_task_request(task))

    assert _count(session_factory) == 0


@pytest.mark.anyio
async def test_persistence_failure_rolls_back(dispatcher, employees, tasks, monkeypatch, transport, session_factory):
    task, _, _ = _task_world(employees, tasks, deputies=1)

    def broken(self, users):
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(UserRepository, "stage_upsert", broken)

    with pytest.raises(PersistenceError):
        await dispatcher.dispatch(_task_request(task))

    assert _count(session_factory) == 0
    assert transport.sent == []


@pytest.mark.anyio
async def test_per_recipient_content(build, employees, tasks, session_factory):
    with session_scope(session_factory) as session:
        TemplateRepository(session).create(
            NotificationTemplate(
                name="PersonalTask",
                subject="Task {{ task_subject }}",
                contents={Channel.IN_APP: "Hi {{ recipient.name }}, see {{ task_subject }}"},
            )
        )
    definition = RouteDefinition(
        replace(TASK_CREATED_CONFIG, template_name="PersonalTask", per_recipient_content=True),
        build_task_created_resolver,
    )
    dispatcher = build(definitions=[definition]).dispatcher
    task, _, _ = _task_world(employees, tasks, deputies=1)

    result = await dispatcher.dispatch(_task_request(task, channels=(Channel.IN_APP,)))

    assert sorted(n.message for n in result.notifications) == [
        "Hi Deputy0, see Approve contract",
        "Hi Performer, see Approve contract",
    ]


@pytest.mark.anyio
async def test_demo_route_addresses_local_user(dispatcher, users, transport):
    customer = users.add(User(id=uuid4(), name="Carla", email="carla@example.com"))

    result = await dispatcher.dispatch(
        NotificationRequest(
            route="OrderCreated",
            parameters={"customerId": str(customer.id), "orderNumber": "A-17", "orderTotal": 12.5},
        )
    )

    assert result.title == "Order A-17 confirmed"
    assert "12.50" in result.message
    assert transport.sent[0][0] == "carla@example.com"


@pytest.mark.anyio
async def test_email_exception_keeps_in_app_delivery(build, employees, tasks, session_factory):
    dispatcher = build(email_transport=RecordingTransport(error=RuntimeError("smtp down"))).dispatcher
    task, _, _ = _task_world(employees, tasks)

    result = await dispatcher.dispatch(_task_request(task))

    assert result.notifications[0].status == NotificationStatus.DELIVERED
    stored = _stored(session_factory, result.id)
    assert stored.status == NotificationStatus.DELIVERED
    assert {d.channel: (d.status, d.error) for d in stored.deliveries} == {
        Channel.IN_APP: (NotificationStatus.DELIVERED, None),
        Channel.EMAIL: (NotificationStatus.FAILED, "smtp down"),
    }


@pytest.mark.anyio
async def test_concurrent_dispatches_share_a_new_recipient(
    dispatcher, employees, tasks, monkeypatch, session_factory
):
    first, performer, _ = _task_world(employees, tasks)
    author = employees.employees[first.author_id]
    second = tasks.add(make_task(author, performer, title="Sign contract"))

    both_staged = threading.Barrier(2)
    stage_upsert = UserRepository.stage_upsert

    def stage_together(self, users):
        stage_upsert(self, users)
        both_staged.wait(timeout=5)

    monkeypatch.setattr(UserRepository, "stage_upsert", stage_together)

    results = await asyncio.gather(
        dispatcher.dispatch(_task_request(first)),
        dispatcher.dispatch(_task_request(second)),
    )

    assert [len(result.notifications) for result in results] == [1, 1]
    assert _count(session_factory) == 2
    with session_scope(session_factory) as session:
        assert list(UserRepository(session).get_map_by_ids([performer.id])) == [performer.id]


@pytest.mark.anyio
async def test_long_subject_is_clipped_to_the_title_column(dispatcher, employees, tasks, session_factory):
    author = make_employee("Author")
    performer = make_employee("Performer")
    employees.add(author, performer)
    task = tasks.add(make_task(author, performer, title="x" * 400))

    result = await dispatcher.dispatch(_task_request(task, channels=(Channel.IN_APP,)))

    title = result.notifications[0].title
    assert len(title) == MAX_TITLE_LENGTH
    assert title.startswith("New task: xxx")
    assert title.endswith("…")
    assert _stored(session_factory, result.id).title == title
