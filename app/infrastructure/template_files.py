"""Load notification templates from disk and seed them into the database."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Channel, NotificationTemplate
from app.infrastructure.repositories import TemplateRepository
from app.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

TEMPLATE_CONFIG_FILE = "template.json"


@dataclass
class TemplateSeedReport:
    """Counts returned after synchronising templates with the database."""

    created: int = 0
    updated: int = 0


def load_template_from_folder(folder: Path) -> NotificationTemplate | None:
    """Read ``template.json`` in ``folder`` plus the body file of each channel.

    The config looks like::

        {"name": "TaskCreated", "subject": "...",
         "channels": {"email": "email.html.j2", "in_app": "in_app.txt.j2"}}
    """

    config_path = folder / TEMPLATE_CONFIG_FILE
    if not config_path.is_file():
        return None

    config = json.loads(config_path.read_text(encoding="utf-8"))
    name = config.get("name") or folder.name
    contents: dict[Channel, str] = {}
    for channel_name, relative_path in (config.get("channels") or {}).items():
        try:
            channel = Channel(channel_name)
        except ValueError:
            logger.warning("Template %s declares unknown channel %s", name, channel_name)
            continue
        contents[channel] = (folder / relative_path).read_text(encoding="utf-8")

    return NotificationTemplate(
        name=name,
        subject=config.get("subject") or "",
        contents=contents,
    )


def load_templates_from_directory(root: Path) -> Sequence[NotificationTemplate]:
    """Return every template found in the immediate sub-folders of ``root``."""

    if not root.is_dir():
        logger.warning("Template directory %s does not exist", root)
        return []

    templates: list[NotificationTemplate] = []
    for folder in sorted(path for path in root.iterdir() if path.is_dir()):
        template = load_template_from_folder(folder)
        if template is not None:
            templates.append(template)
    return templates


def seed_templates(session: Session, root: Path) -> TemplateSeedReport:
    """Insert new templates from ``root`` and refresh the ones already stored."""

    repository = TemplateRepository(session)
    report = TemplateSeedReport()
    for template in load_templates_from_directory(root):
        now = now_in_app_timezone()
        if repository.exists(template.name):
            template.updated_at = now
            repository.update(template)
            report.updated += 1
        else:
            template.created_at = now
            repository.create(template)
            report.created += 1

    logger.info(
        "Notification templates seeded from %s: %d created, %d updated",
        root,
        report.created,
        report.updated,
    )
    return report


__all__ = [
    "TemplateSeedReport",
    "load_template_from_folder",
    "load_templates_from_directory",
    "seed_templates",
]
