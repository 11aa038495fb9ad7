"""Static metadata describing a notification route."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ObjectKind:
    """Kind of business object a route is raised for (task, document...)."""

    name: str
    display_name: str


@dataclass(frozen=True)
class RouteConfiguration:
    """Per-route metadata loaded at startup and read-only afterwards.

    ``include_deputies`` states whether the principal's active deputies are
    also addressed. ``per_recipient_content`` makes the renderer run once per
    recipient with a ``recipient`` variable instead of sharing one rendering.
    """

    name: str
    object_kind: ObjectKind
    template_name: str
    display_name: str
    description: str
    payload_type: type
    tags: frozenset[str] = field(default_factory=frozenset)
    include_deputies: bool = False
    per_recipient_content: bool = False
    icon: str | None = None


__all__ = ["ObjectKind", "RouteConfiguration"]
