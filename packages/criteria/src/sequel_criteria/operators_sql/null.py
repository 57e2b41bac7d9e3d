"""Null check operators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..operators import CriteriaOperator
from ..strategy import SQLOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class IsNullOperator(SQLOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.IS_NULL

    def apply(self, column: ColumnElement[Any], _value: Any) -> ColumnElement[bool]:
        return column.is_(None)


class IsNotNullOperator(SQLOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.IS_NOT_NULL

    def apply(self, column: ColumnElement[Any], _value: Any) -> ColumnElement[bool]:
        return column.is_not(None)
