"""Shared fixtures: a file-backed SQLite database and fake directories."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import DEFAULT_TEMPLATES_DIR, Settings
from app.infrastructure.database import (
    build_engine,
    build_session_factory,
    initialize_database,
    session_scope,
)
from app.infrastructure.template_files import seed_templates

from support import FakeEmployeeDirectory, FakeTaskDirectory, FakeUserDirectory, RecordingTransport


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'notifications.db'}")
    initialize_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = build_session_factory(engine)
    with session_scope(factory) as session:
        seed_templates(session, DEFAULT_TEMPLATES_DIR)
    return factory


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        sendgrid_api_key=None,
        sendgrid_sender=None,
        notification_cleanup_enabled=False,
        notification_cleanup_batch_size=2,
        directory_batch_size=4,
    )


@pytest.fixture
def employees():
    return FakeEmployeeDirectory()


@pytest.fixture
def tasks():
    return FakeTaskDirectory()


@pytest.fixture
def users():
    return FakeUserDirectory()


@pytest.fixture
def transport():
    return RecordingTransport()
