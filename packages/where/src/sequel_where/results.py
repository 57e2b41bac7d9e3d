"""Compiled outputs of the where compiler."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple

from .instructions import ChildOwnsKey, JoinStep, Junction
from .query_spec import QuerySpec


@dataclass(frozen=True)
class CompiledQuery:
    """
    Flat-join compilation of a query.

    Attributes:
        query: Join clauses followed by the filter, sort and pagination text.
        values: Bound values, in marker order.
        spec: The spec that was compiled, including any synthesized sort.
    """

    query: str = ""
    values: list[Any] = field(default_factory=list)
    spec: QuerySpec | None = None


@dataclass(frozen=True)
class SubqueryDescriptor:
    """
    Correlated subquery for one child collection.

    ``query_template`` contains ``placeholder`` exactly once; the caller
    substitutes it with the parent row's key before execution.  ``values``
    never includes the placeholder's value.
    """

    query_template: str
    association: ChildOwnsKey | Junction
    values: list[Any] = field(default_factory=list)
    criteria: QuerySpec | None = None
    placeholder: str = "^?^"

    @property
    def association_name(self) -> str:
        return self.association.name

    @property
    def instructions(self) -> JoinStep | tuple[JoinStep, JoinStep]:
        """The source join step, or the ``(link, target)`` pair for a junction."""
        if isinstance(self.association, Junction):
            return (self.association.link, self.association.target)
        return self.association.step

    def bind(self, parent_key: str) -> str:
        """Substitute the placeholder with an already-rendered parent key."""
        return self.query_template.replace(self.placeholder, parent_key, 1)


class WhereCompilation(NamedTuple):
    single: CompiledQuery
    subqueries: list[SubqueryDescriptor]
