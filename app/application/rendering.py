"""Jinja2 rendering of notification templates for each delivery channel."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from jinja2 import StrictUndefined, Template, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from app.domain.entities import Channel, NotificationTemplate, RenderedContent
from app.domain.errors import RenderError

DEFAULT_DATE_FORMAT = "%Y-%m-%d"


def format_date(value: Any, fmt: str = DEFAULT_DATE_FORMAT) -> str:
    """Format a date, datetime or ISO string; empty values render as ``""``."""

    if value is None or value == "":
        return ""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    if isinstance(value, (date, datetime)):
        return value.strftime(fmt)
    return str(value)


def _build_environment(*, autoescape: bool) -> SandboxedEnvironment:
    env = SandboxedEnvironment(
        autoescape=autoescape,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=False,
    )
    env.filters["format_date"] = format_date
    return env


class TemplateRenderer:
    """Render subject and body of a template with a fixed set of variables.

    Rendering is pure: the output depends only on the template and the data.
    Email bodies are HTML-escaped, in-app bodies and subjects are plain text.
    Referencing a variable the data does not define raises :class:`RenderError`.
    """

    def __init__(self) -> None:
        self._html_env = _build_environment(autoescape=True)
        self._text_env = _build_environment(autoescape=False)
        self._compiled: dict[tuple[bool, str], Template] = {}

    def render(
        self,
        template: NotificationTemplate,
        data: Mapping[str, Any],
        channel: Channel,
    ) -> RenderedContent:
        source = template.content_for(channel)
        if source is None:
            raise RenderError(template.name, f"no content for channel '{channel.value}'")

        context = dict(data)
        try:
            subject = self._compile(template.subject, html=False).render(context)
            body = self._compile(source, html=channel == Channel.EMAIL).render(context)
        except TemplateError as exc:
            raise RenderError(template.name, str(exc)) from exc

        return RenderedContent(subject=" ".join(subject.split()), body=body.strip())

    def render_all(
        self,
        template: NotificationTemplate,
        data: Mapping[str, Any],
        channels: Iterable[Channel],
    ) -> dict[Channel, RenderedContent]:
        return {channel: self.render(template, data, channel) for channel in channels}

    def _compile(self, source: str, *, html: bool) -> Template:
        key = (html, source)
        compiled = self._compiled.get(key)
        if compiled is None:
            env = self._html_env if html else self._text_env
            compiled = env.from_string(source)
            self._compiled[key] = compiled
        return compiled


__all__ = ["TemplateRenderer", "format_date"]
