"""String operators.

``contains`` / ``startsWith`` / ``endsWith`` wrap the operand in ``%``
wildcards before binding it, so the pattern travels as a single value.
Case-insensitive variants use ``ilike``, which SQLAlchemy renders as
``ILIKE`` where the dialect has it and ``lower(..) LIKE lower(..)``
elsewhere.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..operators import CriteriaOperator
from ..strategy import SQLOperator

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement


class _PatternOperator(SQLOperator):
    prefix: str = ""
    suffix: str = ""
    negate: bool = False
    case_insensitive: bool = False

    def apply(self, column: ColumnElement[Any], value: Any) -> ColumnElement[bool]:
        pattern = f"{self.prefix}{value}{self.suffix}"
        if self.case_insensitive:
            if self.negate:
                return column.not_ilike(pattern)
            return column.ilike(pattern)
        if self.negate:
            return column.not_like(pattern)
        return column.like(pattern)


class LikeOperator(_PatternOperator):
    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.LIKE


class NotLikeOperator(_PatternOperator):
    negate = True

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.NOT_LIKE


class ILikeOperator(_PatternOperator):
    case_insensitive = True

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.ILIKE


class ContainsOperator(_PatternOperator):
    prefix = "%"
    suffix = "%"

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.CONTAINS


class IContainsOperator(_PatternOperator):
    prefix = "%"
    suffix = "%"
    case_insensitive = True

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.ICONTAINS


class StartsWithOperator(_PatternOperator):
    suffix = "%"

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.STARTSWITH


class IStartsWithOperator(_PatternOperator):
    suffix = "%"
    case_insensitive = True

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.ISTARTSWITH


class EndsWithOperator(_PatternOperator):
    prefix = "%"

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.ENDSWITH


class IEndsWithOperator(_PatternOperator):
    prefix = "%"
    case_insensitive = True

    @property
    def name(self) -> CriteriaOperator:
        return CriteriaOperator.IENDSWITH
