"""APScheduler wiring for the notification retention job."""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import tzinfo

from anyio import to_thread
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from app.application.use_cases.notifications import NotificationCleanupService

logger = logging.getLogger(__name__)

CLEANUP_JOB_ID = "notification_cleanup"


class CleanupJob:
    """Run the retention cleanup, never twice at the same time.

    A run that starts while another one is active is skipped. Errors are
    logged and swallowed so the hosting process keeps running.
    """

    def __init__(self, service: NotificationCleanupService, *, retention_days: int) -> None:
        self._service = service
        self._retention_days = retention_days
        self._lock = asyncio.Lock()
        self._cancel = threading.Event()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def run(self) -> int | None:
        """Return the number of deleted rows, or ``None`` when skipped or failed."""

        if self._lock.locked():
            logger.info("Notification cleanup already running; skipping this trigger")
            return None

        async with self._lock:
            self._cancel.clear()
            try:
                return await to_thread.run_sync(
                    self._service.cleanup, self._retention_days, self._cancel
                )
            except Exception:
                logger.exception("Notification cleanup failed")
                return None

    def cancel(self) -> None:
        self._cancel.set()


def build_scheduler(
    job: CleanupJob, *, schedule: str, timezone: tzinfo | str = "UTC"
) -> AsyncIOScheduler:
    """Create a scheduler with ``job`` registered on the ``schedule`` crontab."""

    scheduler = AsyncIOScheduler(
        timezone=timezone,
        job_defaults={"coalesce": True, "max_instances": 1, "misfire_grace_time": 300},
    )
    scheduler.add_job(
        func=job.run,
        trigger=CronTrigger.from_crontab(schedule, timezone=timezone),
        id=CLEANUP_JOB_ID,
        name="Purge notifications past retention",
        replace_existing=True,
    )
    return scheduler


def start_scheduler(scheduler: AsyncIOScheduler) -> None:
    if scheduler.running:
        logger.warning("Scheduler is already running")
        return
    scheduler.start()
    logger.info("Scheduler started with %d job(s)", len(scheduler.get_jobs()))


def stop_scheduler(scheduler: AsyncIOScheduler, job: CleanupJob | None = None) -> None:
    if job is not None:
        job.cancel()
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


__all__ = [
    "CLEANUP_JOB_ID",
    "CleanupJob",
    "build_scheduler",
    "start_scheduler",
    "stop_scheduler",
]
