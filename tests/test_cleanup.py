"""Tests for the retention cleanup service and its scheduled job."""

from __future__ import annotations

import asyncio
import threading
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from app.application.use_cases.notifications import NotificationCleanupService
from app.domain.entities import Notification, User
from app.infrastructure.database import session_scope
from app.infrastructure.repositories import NotificationRepository
from app.infrastructure.scheduler import CLEANUP_JOB_ID, CleanupJob, build_scheduler

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


def _store(session_factory, *ages_in_days: int) -> None:
    recipient = User(id=uuid4(), name="Ann", email="ann@example.com")
    notifications = [
        Notification(
            id=uuid4(),
            title="Old news",
            message="...",
            route="TaskCreated",
            recipient=recipient,
            created_at=NOW - timedelta(days=age),
        )
        for age in ages_in_days
    ]
    with session_scope(session_factory) as session:
        NotificationRepository(session).create_many(notifications)


def _count(session_factory) -> int:
    with session_scope(session_factory) as session:
        return NotificationRepository(session).count()


def test_cleanup_deletes_only_rows_past_retention(session_factory):
    _store(session_factory, 59, 61, 90)
    service = NotificationCleanupService(session_factory, batch_size=500)

    deleted = service.cleanup(60, now=NOW)

    assert deleted == 2
    assert _count(session_factory) == 1


def test_cleanup_is_idempotent(session_factory):
    _store(session_factory, 61, 62)
    service = NotificationCleanupService(session_factory, batch_size=500)

    assert service.cleanup(60, now=NOW) == 2
    assert service.cleanup(60, now=NOW) == 0


def test_cleanup_runs_in_batches(session_factory):
    _store(session_factory, 61, 62, 63, 64, 65)
    service = NotificationCleanupService(session_factory, batch_size=2)

    assert service.cleanup(60, now=NOW) == 5
    assert _count(session_factory) == 0


def test_non_positive_retention_deletes_nothing(session_factory, caplog):
    _store(session_factory, 400)
    service = NotificationCleanupService(session_factory)

    with caplog.at_level("WARNING"):
        assert service.cleanup(0, now=NOW) == 0

    assert _count(session_factory) == 1
    assert "not positive" in caplog.text


def test_cancellation_keeps_committed_batches(session_factory, monkeypatch):
    _store(session_factory, 61, 62, 63, 64, 65)
    service = NotificationCleanupService(session_factory, batch_size=2)
    cancel = threading.Event()
    original = NotificationRepository.delete_created_before

    def delete_then_cancel(self, cutoff, *, limit):
        removed = original(self, cutoff, limit=limit)
        cancel.set()
        return removed

    monkeypatch.setattr(NotificationRepository, "delete_created_before", delete_then_cancel)

    assert service.cleanup(60, cancel, now=NOW) == 2
    assert _count(session_factory) == 3


@pytest.mark.anyio
async def test_overlapping_job_runs_are_skipped(caplog):
    started = threading.Event()
    release = threading.Event()

    class SlowService:
        calls = 0

        def cleanup(self, retention_days, cancel_event=None):
            SlowService.calls += 1
            started.set()
            release.wait(timeout=5)
            return 7

    job = CleanupJob(SlowService(), retention_days=60)
    first = asyncio.create_task(job.run())
    while not started.is_set():
        await asyncio.sleep(0.01)

    with caplog.at_level("INFO"):
        skipped = await job.run()
    release.set()

    assert skipped is None
    assert await first == 7
    assert SlowService.calls == 1
    assert "already running" in caplog.text


@pytest.mark.anyio
async def test_job_swallows_cleanup_errors(caplog):
    class BrokenService:
        def cleanup(self, retention_days, cancel_event=None):
            raise RuntimeError("database is gone")

    job = CleanupJob(BrokenService(), retention_days=60)

    with caplog.at_level("ERROR"):
        assert await job.run() is None

    assert "Notification cleanup failed" in caplog.text
    assert not job.running


@pytest.mark.anyio
async def test_scheduler_registers_cleanup_job(session_factory):
    job = CleanupJob(NotificationCleanupService(session_factory), retention_days=60)
    scheduler = build_scheduler(job, schedule="0 2 * * *", timezone="UTC")

    scheduler.start(paused=True)
    try:
        scheduled = scheduler.get_job(CLEANUP_JOB_ID)
        assert scheduled is not None
        assert scheduled.max_instances == 1
        assert scheduled.coalesce is True
        assert "hour='2'" in str(scheduled.trigger)
    finally:
        scheduler.shutdown(wait=False)
