"""Filter, sort and paging criteria for notification searches."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from math import ceil
from typing import Any, Generic, TypeVar

T = TypeVar("T")

MAX_PAGE_SIZE = 1000


class FilterOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    GREATER_THAN = "greater_than"
    GREATER_THAN_OR_EQUAL = "greater_than_or_equal"
    LESS_THAN = "less_than"
    LESS_THAN_OR_EQUAL = "less_than_or_equal"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    IN = "in"


class FilterLogic(str, Enum):
    """How a filter combines with the conditions before it."""

    AND = "and"
    OR = "or"


@dataclass(frozen=True)
class QueryFilter:
    field: str
    value: Any = None
    operator: FilterOperator = FilterOperator.EQUALS
    logic: FilterLogic = FilterLogic.AND


@dataclass(frozen=True)
class SortOption:
    field: str
    descending: bool = False


@dataclass(frozen=True)
class NotificationQuery:
    """Filters are folded left to right, each joined by its own ``logic``."""

    filters: tuple[QueryFilter, ...] = ()
    sort: tuple[SortOption, ...] = ()
    page: int = 1
    page_size: int = 20
    include_total_count: bool = True

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be 1 or greater")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 20
    total_count: int | None = None

    @property
    def total_pages(self) -> int | None:
        if self.total_count is None:
            return None
        return ceil(self.total_count / self.page_size)


__all__ = [
    "FilterLogic",
    "FilterOperator",
    "MAX_PAGE_SIZE",
    "NotificationQuery",
    "Page",
    "QueryFilter",
    "SortOption",
]
