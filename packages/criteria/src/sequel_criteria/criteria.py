"""
Criteria: filter, sort and pagination for a single table.

``Criteria`` is what the criteria compiler consumes.  It deliberately has
no notion of associations; callers strip those before compiling.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any

from .exceptions import ValidationError


class SortDirection(IntEnum):
    """Sort direction, using the legacy ``1`` / ``-1`` encoding."""

    ASC = 1
    DESC = -1

    @property
    def sql(self) -> str:
        return self.name

    @classmethod
    def parse(cls, value: Any) -> SortDirection:
        """Accept ``1``, ``-1``, ``"asc"``, ``"desc"`` or a member."""
        if isinstance(value, SortDirection):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
        elif isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        raise ValidationError(f"Invalid sort direction: {value!r}", path="sort")


@dataclass(frozen=True)
class Criteria:
    """
    Immutable filter / sort / pagination container.

    Attributes:
        where: Filter tree (legacy mapping or operator-node AST).
        sort: Ordered mapping of attribute to direction. ``None`` means
            "no sort given", which is different from an empty mapping.
        skip: Number of rows to skip.
        limit: Maximum number of rows.
    """

    where: Mapping[str, Any] | None = None
    sort: Mapping[str, Any] | None = None
    skip: int | None = None
    limit: int | None = None

    @property
    def has_where(self) -> bool:
        return bool(self.where)

    @property
    def has_sort(self) -> bool:
        return self.sort is not None

    def with_sort(self, sort: Mapping[str, Any]) -> Criteria:
        """Return a copy with the sort replaced."""
        return replace(self, sort=dict(sort))

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.where is not None:
            result["where"] = dict(self.where)
        if self.sort is not None:
            result["sort"] = {
                attr: (
                    int(direction)
                    if isinstance(direction, SortDirection)
                    else direction
                )
                for attr, direction in self.sort.items()
            }
        if self.skip is not None:
            result["skip"] = self.skip
        if self.limit is not None:
            result["limit"] = self.limit
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Criteria:
        if not data:
            return cls()
        return cls(
            where=data.get("where"),
            sort=data.get("sort"),
            skip=data.get("skip"),
            limit=data.get("limit"),
        )
