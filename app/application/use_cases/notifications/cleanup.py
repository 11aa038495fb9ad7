"""Retention purge of old notifications."""

from __future__ import annotations

import logging
import threading
from datetime import datetime

from sqlalchemy.orm import Session, sessionmaker

from app.infrastructure.database import session_scope
from app.infrastructure.repositories import NotificationRepository
from app.utils import retention_cutoff

logger = logging.getLogger(__name__)


class NotificationCleanupService:
    """Delete notifications older than the retention window, batch by batch.

    Each batch is committed on its own. The cancel event is checked between
    batches; when it is set the rows deleted so far are kept and counted.
    """

    def __init__(self, session_factory: sessionmaker[Session], *, batch_size: int = 500) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._session_factory = session_factory
        self._batch_size = batch_size

    def cleanup(
        self,
        retention_days: int,
        cancel_event: threading.Event | None = None,
        *,
        now: datetime | None = None,
    ) -> int:
        if retention_days <= 0:
            logger.warning(
                "Notification cleanup skipped: retention of %s day(s) is not positive",
                retention_days,
            )
            return 0

        cutoff = retention_cutoff(retention_days, now=now)
        logger.info(
            "Notification cleanup started: deleting rows created before %s (%d days)",
            cutoff.isoformat(),
            retention_days,
        )

        deleted = 0
        with session_scope(self._session_factory) as session:
            repository = NotificationRepository(session)
            while True:
                if cancel_event is not None and cancel_event.is_set():
                    logger.warning(
                        "Notification cleanup cancelled after deleting %d row(s)", deleted
                    )
                    return deleted
                removed = repository.delete_created_before(cutoff, limit=self._batch_size)
                deleted += removed
                if removed < self._batch_size:
                    break

        logger.info("Notification cleanup completed: %d row(s) deleted", deleted)
        return deleted


__all__ = ["NotificationCleanupService"]
