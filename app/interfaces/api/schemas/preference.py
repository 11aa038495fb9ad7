"""Schemas for per-user route preferences."""

from pydantic import Field

from .base import CamelModel


class RoutePreferenceRead(CamelModel):
    route: str
    display_name: str
    object_kind: str
    enabled: bool


class RoutePreferenceItem(CamelModel):
    route: str = Field(..., min_length=1)
    enabled: bool


class RoutePreferencesUpdate(CamelModel):
    preferences: list[RoutePreferenceItem] = Field(default_factory=list)

    def as_mapping(self) -> dict[str, bool]:
        return {item.route: item.enabled for item in self.preferences}


__all__ = ["RoutePreferenceItem", "RoutePreferenceRead", "RoutePreferencesUpdate"]
