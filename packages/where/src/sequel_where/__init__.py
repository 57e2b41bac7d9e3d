"""sequel-where — flat joins and correlated subqueries for associations."""

from __future__ import annotations

from .compiler import CriteriaFactory, WhereCompiler
from .defaults import strip_trailing_connector, with_default_sort
from .exceptions import InstructionError
from .factory import QuerySpecFactory
from .instructions import (
    Association,
    ChildOwnsKey,
    JoinStep,
    JoinStrategy,
    Junction,
    ParentOwnsKey,
)
from .query_spec import QuerySpec
from .results import CompiledQuery, SubqueryDescriptor, WhereCompilation

__all__ = [
    # Spec
    "QuerySpec",
    "QuerySpecFactory",
    # Associations
    "Association",
    "ChildOwnsKey",
    "JoinStep",
    "JoinStrategy",
    "Junction",
    "ParentOwnsKey",
    # Compilation
    "CriteriaFactory",
    "WhereCompiler",
    "CompiledQuery",
    "SubqueryDescriptor",
    "WhereCompilation",
    # Helpers
    "strip_trailing_connector",
    "with_default_sort",
    # Exceptions
    "InstructionError",
]
