"""
SQL operator implementations and default registry.

Usage::

    from sqlalchemy import column

    from sequel_criteria.operators_sql import DEFAULT_SQL_REGISTRY

    clause = DEFAULT_SQL_REGISTRY.apply(CriteriaOperator.EQ, column("id"), 1)
"""

from __future__ import annotations

from ..strategy import SQLOperatorRegistry
from .null import IsNotNullOperator, IsNullOperator
from .set import BetweenOperator, InOperator, NotBetweenOperator, NotInOperator
from .standard import (
    EqualOperator,
    GreaterEqualOperator,
    GreaterThanOperator,
    LessEqualOperator,
    LessThanOperator,
    NotEqualOperator,
)
from .string import (
    ContainsOperator,
    EndsWithOperator,
    IContainsOperator,
    IEndsWithOperator,
    ILikeOperator,
    IStartsWithOperator,
    LikeOperator,
    NotLikeOperator,
    StartsWithOperator,
)


def build_default_sql_registry() -> SQLOperatorRegistry:
    """Create a registry with all built-in SQL operators."""
    return SQLOperatorRegistry(
        # Standard comparison
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        LessThanOperator(),
        GreaterEqualOperator(),
        LessEqualOperator(),
        # Set
        InOperator(),
        NotInOperator(),
        BetweenOperator(),
        NotBetweenOperator(),
        # String
        LikeOperator(),
        NotLikeOperator(),
        ILikeOperator(),
        ContainsOperator(),
        IContainsOperator(),
        StartsWithOperator(),
        IStartsWithOperator(),
        EndsWithOperator(),
        IEndsWithOperator(),
        # Null
        IsNullOperator(),
        IsNotNullOperator(),
    )


DEFAULT_SQL_REGISTRY: SQLOperatorRegistry = build_default_sql_registry()

__all__ = [
    "DEFAULT_SQL_REGISTRY",
    "build_default_sql_registry",
    "SQLOperatorRegistry",
]
