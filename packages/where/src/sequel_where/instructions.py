"""
Association instructions.

Each requested association is one of three closed variants, each carrying
exactly the join steps its strategy needs:

- :class:`ParentOwnsKey`: the parent row holds the foreign key; compiled
  as a flat ``LEFT OUTER JOIN``.
- :class:`ChildOwnsKey`: the child rows hold the foreign key; compiled as
  a correlated subquery so the child collection keeps its own pagination.
- :class:`Junction`: many-to-many through a link table; compiled as a
  two-stage correlated subquery.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .query_spec import QuerySpec


class JoinStrategy(IntEnum):
    """Join strategy, numbered with the legacy strategy codes."""

    PARENT_OWNS_KEY = 1
    CHILD_OWNS_KEY = 2
    JUNCTION = 3


@dataclass(frozen=True)
class JoinStep:
    """
    One join between two tables.

    Attributes:
        parent_table: Table on the parent side of the join.
        parent_key: Key column on the parent side.
        child_table: Table on the child side of the join.
        child_key: Key column on the child side.
        criteria: The association's own filter, sort and pagination.
            Only meaningful on the step that selects the associated rows
            (the single step of a ``ChildOwnsKey``, the target step of a
            ``Junction``).
    """

    parent_table: str
    parent_key: str
    child_table: str
    child_key: str
    criteria: QuerySpec | None = None

    def with_criteria(self, criteria: QuerySpec | None) -> JoinStep:
        return replace(self, criteria=criteria)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "parent": self.parent_table,
            "parentKey": self.parent_key,
            "child": self.child_table,
            "childKey": self.child_key,
        }
        if self.criteria is not None:
            result["criteria"] = self.criteria.to_dict()
        return result


@dataclass(frozen=True)
class ParentOwnsKey:
    """Association whose foreign key lives on the parent table."""

    strategy: ClassVar[JoinStrategy] = JoinStrategy.PARENT_OWNS_KEY

    name: str
    step: JoinStep

    @property
    def steps(self) -> tuple[JoinStep, ...]:
        return (self.step,)


@dataclass(frozen=True)
class ChildOwnsKey:
    """Association whose foreign key lives on the child table."""

    strategy: ClassVar[JoinStrategy] = JoinStrategy.CHILD_OWNS_KEY

    name: str
    step: JoinStep

    @property
    def steps(self) -> tuple[JoinStep, ...]:
        return (self.step,)


@dataclass(frozen=True)
class Junction:
    """
    Many-to-many association through a link table.

    Attributes:
        link: Stage one, from the parent table into the link table.
        target: Stage two, from the link table into the target table.
            Carries the association's criteria.
    """

    strategy: ClassVar[JoinStrategy] = JoinStrategy.JUNCTION

    name: str
    link: JoinStep
    target: JoinStep

    @property
    def steps(self) -> tuple[JoinStep, ...]:
        return (self.link, self.target)


Association = ParentOwnsKey | ChildOwnsKey | Junction
