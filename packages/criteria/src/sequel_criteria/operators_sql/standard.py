"""Standard comparison operators.

Operands are always bound through :func:`sqlalchemy.literal` with the
column's type, so booleans travel as parameters instead of ``true``/``1``
constants.  ``None`` turns equality into ``IS NULL`` and inequality into
``IS NOT NULL``.
"""

from __future__ import annotations

import operator as op_module
from typing import TYPE_CHECKING, Any, ClassVar, cast

from sqlalchemy import literal

from ..operators import CriteriaOperator
from ..strategy import SQLOperator

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy import ColumnElement


class _ComparisonOperator(SQLOperator):
    comparator: ClassVar[Callable[[Any, Any], Any]] = op_module.eq

    def apply(self, column: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        operand = literal(value, column.type)
        return cast("ColumnElement[bool]", self.comparator(column, operand))


class EqualOperator(_ComparisonOperator):
    comparator = op_module.eq

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.EQ

    def apply(self, column: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        if value is None:
            return column.is_(None)
        return super().apply(column, value)


class NotEqualOperator(_ComparisonOperator):
    comparator = op_module.ne

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.NE

    def apply(self, column: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        if value is None:
            return column.is_not(None)
        return super().apply(column, value)


class GreaterThanOperator(_ComparisonOperator):
    comparator = op_module.gt

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.GT


class LessThanOperator(_ComparisonOperator):
    comparator = op_module.lt

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.LT


class GreaterEqualOperator(_ComparisonOperator):
    comparator = op_module.ge

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.GE


class LessEqualOperator(_ComparisonOperator):
    comparator = op_module.le

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.LE
