"""
SQL operator compilation strategy.

Each ``SQLOperator`` turns one leaf condition into a SQLAlchemy boolean
expression over a ``sqlalchemy.column()``.  Rendering, quoting and bind
markers are left to the dialect the expression is compiled with.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from .exceptions import OperatorNotFoundError

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement

    from .operators import CriteriaOperator


class SQLOperator(ABC):
    """
    Strategy interface for compiling a criteria operator into a
    SQLAlchemy ``ColumnElement[bool]``.
    """

    @property
    @abstractmethod
    def name(self) -> CriteriaOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def apply(self, column: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        """
        Build a filter clause.

        Args:
            column: The table-bound column the condition targets.
            value: The condition value from the criteria.

        Returns:
            A SQLAlchemy boolean expression.
        """
        ...


class SQLOperatorRegistry:
    """
    Operator strategies keyed by :class:`CriteriaOperator`.

    A later registration for the same operator replaces the earlier one::

        registry = DEFAULT_SQL_REGISTRY.copy()
        registry.register(CaseFoldEqual())
    """

    def __init__(self, *operators: SQLOperator) -> None:
        self._operators: dict[CriteriaOperator, SQLOperator] = {}
        self.register(*operators)

    def register(self, *operators: SQLOperator) -> None:
        for strategy in operators:
            self._operators[strategy.name] = strategy

    def unregister(self, name: CriteriaOperator) -> None:
        self._operators.pop(name, None)

    def get(self, name: CriteriaOperator) -> SQLOperator | None:
        return self._operators.get(name)

    def copy(self) -> SQLOperatorRegistry:
        return SQLOperatorRegistry(*self._operators.values())

    @property
    def supported_operators(self) -> frozenset[CriteriaOperator]:
        return frozenset(self._operators)

    def __contains__(self, name: object) -> bool:
        return name in self._operators

    def __iter__(self) -> Iterator[SQLOperator]:
        return iter(self._operators.values())

    def __len__(self) -> int:
        return len(self._operators)

    def apply(
        self, name: CriteriaOperator, column: ColumnElement[Any], value: Any
    ) -> ColumnElement[bool]:
        """
        Compile one condition with the strategy registered for *name*.

        Raises:
            OperatorNotFoundError: If no strategy handles *name*.
        """
        strategy = self._operators.get(name)
        if strategy is None:
            raise OperatorNotFoundError(
                str(getattr(name, "value", name)),
                sorted(op.value for op in self._operators),
            )
        return strategy.apply(column, value)
