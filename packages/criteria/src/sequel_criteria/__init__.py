from .compiler import CriteriaCompiler, ICriteriaCompiler
from .criteria import Criteria, SortDirection
from .exceptions import (
    CriteriaError,
    FieldNotFoundError,
    FieldNotQueryableError,
    OperatorNotFoundError,
    ValidationError,
)
from .operators import CriteriaOperator
from .operators_sql import DEFAULT_SQL_REGISTRY, build_default_sql_registry
from .params import PARAMSTYLES
from .result import ParsedCriteria
from .strategy import SQLOperator, SQLOperatorRegistry
from .syntax import WhereSyntax

__all__ = [
    # Core types
    "Criteria",
    "CriteriaOperator",
    "ParsedCriteria",
    "SortDirection",
    # Compilation
    "CriteriaCompiler",
    "ICriteriaCompiler",
    "PARAMSTYLES",
    "WhereSyntax",
    # Operator strategy
    "SQLOperator",
    "SQLOperatorRegistry",
    "DEFAULT_SQL_REGISTRY",
    "build_default_sql_registry",
    # Exceptions
    "CriteriaError",
    "ValidationError",
    "OperatorNotFoundError",
    "FieldNotFoundError",
    "FieldNotQueryableError",
]
