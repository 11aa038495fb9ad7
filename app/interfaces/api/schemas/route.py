"""Schemas of the route catalogue."""

from .base import CamelModel


class ObjectKindRead(CamelModel):
    name: str
    display_name: str


class RouteRead(CamelModel):
    name: str
    display_name: str
    description: str
    template_name: str
    object_kind: ObjectKindRead
    tags: list[str]
    icon: str | None = None
    include_deputies: bool
    payload_schema: dict


__all__ = ["ObjectKindRead", "RouteRead"]
