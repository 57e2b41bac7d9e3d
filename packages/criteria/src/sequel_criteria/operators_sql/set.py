"""Set operators: in, not_in, between, not_between.

Membership lists are expanding parameters; SQLAlchemy renders one marker
per element, and the dialect's empty-set form when the list is empty.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import literal

from ..exceptions import ValidationError
from ..operators import CriteriaOperator
from ..strategy import SQLOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _as_range(value: Any, op: CriteriaOperator) -> tuple[Any, Any]:
    if not isinstance(value, Sequence) or isinstance(value, str) or len(value) != 2:
        raise ValidationError(
            f"Operator '{op.value}' requires a [low, high] pair, got {value!r}"
        )
    return value[0], value[1]


def _bounds(
    column: ColumnElement[Any], value: Any, op: CriteriaOperator
) -> tuple[ColumnElement[Any], ColumnElement[Any]]:
    low, high = _as_range(value, op)
    return literal(low, column.type), literal(high, column.type)


class InOperator(SQLOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.IN

    def apply(self, column: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        return column.in_(_as_list(value))


class NotInOperator(SQLOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.NOT_IN

    def apply(self, column: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        return column.not_in(_as_list(value))


class BetweenOperator(SQLOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.BETWEEN

    def apply(self, column: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        return column.between(*_bounds(column, value, self.name))


class NotBetweenOperator(SQLOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.NOT_BETWEEN

    def apply(self, column: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        return cast(
            "ColumnElement[bool]", ~column.between(*_bounds(column, value, self.name))
        )
