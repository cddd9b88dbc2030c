# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Paging primitives shared by every listing endpoint.

A listing is described by a :class:`PageRequest`. Repositories either slice a
fully ordered sequence with :func:`paginate` or push ``OFFSET/LIMIT`` into the
database and wrap the slice with :func:`build_page`. Ordering keys coming from
clients are resolved through a static :class:`SortMapping`.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Generic, TypeVar

from .exceptions import InvariantViolation, UnknownSortKeyError

T = TypeVar("T")

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 20
DEFAULT_PAGE_SIZE = 10

_DIRECTIONS = {"asc": False, "desc": True}


@dataclass(slots=True, frozen=True)
class PageRequest:
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    order_by: str | None = None

    def __post_init__(self) -> None:
        if self.page_number < 1:
            raise InvariantViolation("page number must be at least 1", field="pageNumber")

    def clamped(self, max_page_size: int = MAX_PAGE_SIZE) -> PageRequest:
        size = min(max(self.page_size, MIN_PAGE_SIZE), max(max_page_size, MIN_PAGE_SIZE))
        if size == self.page_size:
            return self
        return replace(self, page_size=size)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


@dataclass(slots=True, frozen=True)
class PageLink:
    order_by: str | None
    page_number: int
    page_size: int


@dataclass(slots=True, frozen=True)
class PageResult(Generic[T]):
    items: Sequence[T]
    total_count: int
    current_page: int
    page_size: int
    order_by: str | None = None

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def previous_link(self) -> PageLink | None:
        if not self.has_previous:
            return None
        return PageLink(self.order_by, self.current_page - 1, self.page_size)

    @property
    def next_link(self) -> PageLink | None:
        if not self.has_next:
            return None
        return PageLink(self.order_by, self.current_page + 1, self.page_size)

    def map(self, func: Callable[[T], Any]) -> PageResult[Any]:
        return replace(self, items=[func(item) for item in self.items])


def build_page(total_count: int, items: Iterable[T], request: PageRequest) -> PageResult[T]:
    """Wrap an already sliced page; ``request`` must be clamped."""
    if total_count < 0:
        raise InvariantViolation("total count cannot be negative", field="totalCount")
    return PageResult(
        items=list(items),
        total_count=total_count,
        current_page=request.page_number,
        page_size=request.page_size,
        order_by=request.order_by,
    )


def paginate(
    records: Sequence[T], request: PageRequest, *, max_page_size: int = MAX_PAGE_SIZE
) -> PageResult[T]:
    request = request.clamped(max_page_size)
    start = request.offset
    return build_page(len(records), records[start : start + request.page_size], request)


@dataclass(slots=True, frozen=True)
class SortColumn:
    """Storage attributes a logical sort key expands to."""

    attributes: tuple[str, ...]
    revert: bool = False

    @classmethod
    def of(cls, *attributes: str, revert: bool = False) -> SortColumn:
        return cls(attributes=tuple(attributes), revert=revert)


@dataclass(slots=True, frozen=True)
class SortTerm:
    attribute: str
    descending: bool = False


@dataclass(slots=True, frozen=True)
class SortMapping:
    name: str
    columns: Mapping[str, SortColumn]
    default_key: str
    _lookup: dict[str, SortColumn] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        lookup = {key.lower(): column for key, column in self.columns.items()}
        if self.default_key.lower() not in lookup:
            raise InvariantViolation(
                f"default sort key '{self.default_key}' is not mapped for {self.name}",
                field="orderBy",
            )
        object.__setattr__(self, "_lookup", lookup)

    @property
    def keys(self) -> list[str]:
        return sorted(self.columns)

    def resolve(self, order_by: str | None) -> list[SortTerm]:
        """Turn ``"lastName desc, username"`` into storage sort terms."""
        expression = (order_by or "").strip() or self.default_key
        terms: list[SortTerm] = []
        for clause in expression.split(","):
            parts = clause.split()
            if not parts:
                continue
            if len(parts) > 2 or (len(parts) == 2 and parts[1].lower() not in _DIRECTIONS):
                raise UnknownSortKeyError(clause.strip(), resource=self.name, allowed=self.keys)
            column = self._lookup.get(parts[0].lower())
            if column is None:
                raise UnknownSortKeyError(parts[0], resource=self.name, allowed=self.keys)
            descending = len(parts) == 2 and _DIRECTIONS[parts[1].lower()]
            if column.revert:
                descending = not descending
            terms.extend(SortTerm(attribute, descending) for attribute in column.attributes)
        return terms

    def validate(self, model: type) -> None:
        missing = sorted(
            attribute
            for column in self.columns.values()
            for attribute in column.attributes
            if not _has_attribute(model, attribute)
        )
        if missing:
            raise InvariantViolation(
                f"{self.name} sort mapping references unknown attributes {missing} "
                f"on {model.__name__}",
                field="orderBy",
            )

    def sort(self, records: Iterable[T], order_by: str | None) -> list[T]:
        """In-memory ordering with the same semantics as the SQL repositories."""
        ordered = list(records)
        for term in reversed(self.resolve(order_by)):
            ordered.sort(
                key=lambda record, attr=term.attribute: _sort_value(getattr(record, attr)),
                reverse=term.descending,
            )
        return ordered


def _has_attribute(model: type, attribute: str) -> bool:
    if hasattr(model, attribute):
        return True
    return is_dataclass(model) and attribute in {f.name for f in fields(model)}


def _sort_value(value: Any) -> tuple[bool, Any]:
    return (value is None, value if value is not None else 0)


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "MIN_PAGE_SIZE",
    "PageLink",
    "PageRequest",
    "PageResult",
    "SortColumn",
    "SortMapping",
    "SortTerm",
    "build_page",
    "paginate",
]
