"""Tests for loading notification templates from disk."""

from __future__ import annotations

import json

from app.config import DEFAULT_TEMPLATES_DIR
from app.domain.entities import Channel
from app.infrastructure.database import build_session_factory, session_scope
from app.infrastructure.repositories import TemplateRepository
from app.infrastructure.template_files import (
    load_template_from_folder,
    load_templates_from_directory,
    seed_templates,
)


def _write_template(root, name, *, channels=None, subject="Hello {{ name }}"):
    folder = root / name
    folder.mkdir(parents=True)
    channels = channels or {"in_app": "in_app.txt.j2"}
    for relative_path in channels.values():
        (folder / relative_path).write_text(f"{name} body", encoding="utf-8")
    (folder / "template.json").write_text(
        json.dumps({"name": name, "subject": subject, "channels": channels}),
        encoding="utf-8",
    )
    return folder


def test_bundled_templates_cover_every_channel():
    templates = {template.name: template for template in load_templates_from_directory(DEFAULT_TEMPLATES_DIR)}

    assert {"TaskCreated", "TaskCompleted", "OrderCreated"} <= set(templates)
    for template in templates.values():
        assert set(template.contents) == {Channel.EMAIL, Channel.IN_APP}
        assert template.subject


def test_unknown_channel_is_skipped(tmp_path, caplog):
    folder = _write_template(tmp_path, "Sms", channels={"in_app": "a.txt", "sms": "b.txt"})

    with caplog.at_level("WARNING"):
        template = load_template_from_folder(folder)

    assert list(template.contents) == [Channel.IN_APP]
    assert "unknown channel sms" in caplog.text


def test_folder_without_config_is_ignored(tmp_path):
    (tmp_path / "Empty").mkdir()

    assert load_template_from_folder(tmp_path / "Empty") is None
    assert load_templates_from_directory(tmp_path) == []
    assert load_templates_from_directory(tmp_path / "missing") == []


def test_seed_creates_then_updates(tmp_path, engine):
    factory = build_session_factory(engine)
    _write_template(tmp_path, "Greeting")

    with session_scope(factory) as session:
        first = seed_templates(session, tmp_path)
    assert (first.created, first.updated) == (1, 0)

    (tmp_path / "Greeting" / "in_app.txt.j2").write_text("Changed body", encoding="utf-8")
    with session_scope(factory) as session:
        second = seed_templates(session, tmp_path)
    assert (second.created, second.updated) == (0, 1)

    with session_scope(factory) as session:
        stored = TemplateRepository(session).get_by_name("Greeting")
    assert stored.contents[Channel.IN_APP] == "Changed body"
    assert stored.updated_at is not None
