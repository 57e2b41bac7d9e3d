"""
Compile ``Criteria`` into SQL text with positional binds.

Uses the strategy pattern: each operator is an isolated class in
``operators_sql/``, registered in a ``SQLOperatorRegistry``.  The compiler
normalises the where tree through a :class:`WhereSyntax`, walks the
resulting node tree, and delegates leaf-node compilation to the registry.

Columns
-------
Bare attribute names resolve against the compiler's table; dotted
``table.attr`` names resolve against that table in the schema catalog.
Each catalog table is mirrored as a ``sqlalchemy.table()`` whose names
are always quoted.

Rendering
---------
Filter, sort and pagination are applied to a single ``select()`` which is
compiled with the escaper's dialect, cloned with the requested positional
paramstyle.  The text after the ``FROM`` list is returned, so dialect
rules such as SQLite's ``LIMIT -1 OFFSET`` apply, and the values are read
from the compiled statement's positional parameters.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlalchemy import (
    ColumnElement,
    Select,
    TableClause,
    and_,
    asc,
    column,
    desc,
    literal_column,
    not_,
    or_,
    quoted_name,
    select,
    table,
)
from sqlalchemy.sql import operators as sql_operators

from sequel_core.escaping import IdentifierEscaper
from sequel_core.exceptions import TableNotFoundError

from .criteria import SortDirection
from .exceptions import (
    FieldNotFoundError,
    FieldNotQueryableError,
    OperatorNotFoundError,
    ValidationError,
)
from .operators import CriteriaOperator
from .operators_sql import DEFAULT_SQL_REGISTRY
from .params import positional_dialect, shift_numeric_markers
from .result import ParsedCriteria
from .syntax import WhereSyntax

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

    from sequel_core.schema import SchemaCatalog

    from .criteria import Criteria
    from .strategy import SQLOperatorRegistry

logger = logging.getLogger(__name__)

_VALID_OPERATORS: list[str] = [m.value for m in CriteriaOperator]


@runtime_checkable
class ICriteriaCompiler(Protocol):
    """Protocol for criteria expression compilers."""

    def compile(self, criteria: Criteria) -> ParsedCriteria:
        """Compile filter, sort and pagination for one table."""
        ...


class CriteriaCompiler:
    """
    Criteria expression compiler for a single table.

    Args:
        table: The table the criteria apply to.
        catalog: Schema catalog used to resolve and validate attributes.
        escaper: Supplies the dialect; defaults to :class:`IdentifierEscaper`.
        registry: Operator registry; defaults to ``DEFAULT_SQL_REGISTRY``.
        paramstyle: ``"qmark"``, ``"numeric_dollar"`` or ``"format"``.
        start_index: First number used by ``numeric_dollar`` markers.
        syntax: Where-tree normaliser; defaults to :class:`WhereSyntax`.

    Raises:
        TableNotFoundError: If *table* is not in the catalog.
        CriteriaError: If *paramstyle* is not supported.
    """

    def __init__(
        self,
        table: str,
        catalog: SchemaCatalog,
        *,
        escaper: IdentifierEscaper | None = None,
        registry: SQLOperatorRegistry | None = None,
        paramstyle: str = "qmark",
        start_index: int = 1,
        syntax: WhereSyntax | None = None,
    ) -> None:
        self._table = table
        self._catalog = catalog
        self._dialect: Dialect = positional_dialect(
            (escaper or IdentifierEscaper()).dialect, paramstyle
        )
        self._registry = registry or DEFAULT_SQL_REGISTRY
        self._start_index = start_index
        self._syntax = syntax or WhereSyntax()
        self._tables: dict[str, TableClause] = {}
        # Fail fast on an unknown table
        catalog.table(table)

    @property
    def table(self) -> str:
        return self._table

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def compile(self, criteria: Criteria) -> ParsedCriteria:
        stmt = select(literal_column("*")).select_from(self._table_clause(self._table))
        predicate = self._compile_where(criteria.where)
        if predicate is not None:
            stmt = stmt.where(predicate)
        stmt = self._apply_sort(stmt, criteria.sort)
        stmt = self._apply_pagination(stmt, criteria.skip, criteria.limit)

        query, values = self._render(stmt)
        logger.debug("Compiled criteria for %s: %d value(s)", self._table, len(values))
        return ParsedCriteria(query=query, values=values)

    def _render(self, stmt: Select[Any]) -> tuple[str, list[Any]]:
        head = select(literal_column("*")).select_from(*stmt.get_final_froms())
        prefix = head.compile(dialect=self._dialect).string
        state = stmt.compile(dialect=self._dialect).construct_expanded_state()

        query = " ".join(state.statement[len(prefix) :].split())
        query = query.removeprefix("WHERE ")
        if self._dialect.paramstyle == "numeric_dollar":
            query = shift_numeric_markers(query, self._start_index)
        return query, list(state.positional_parameters)

    # ------------------------------------------------------------------ #
    # Where                                                               #
    # ------------------------------------------------------------------ #

    def _compile_where(
        self, where: Mapping[str, Any] | None
    ) -> ColumnElement[bool] | None:
        node = self._syntax.parse_where(where)
        if not node:
            return None
        clause = self._compile_node(node, path="where")
        # Parenthesise a top-level OR so callers can AND onto it
        return clause.self_group(against=sql_operators.and_)

    def _compile_node(
        self, data: Mapping[str, Any], *, path: str
    ) -> ColumnElement[bool]:
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Expected a dict, got {type(data).__name__}", path=path
            )
        op_str = str(data.get("op", "")).lower()

        # Try logical operators first
        logical_result = self._compile_logical_operator(data, op_str, path)
        if logical_result is not None:
            return logical_result

        # Otherwise compile as leaf node
        return self._compile_leaf_node(data, op_str, path)

    def _compile_logical_operator(
        self, data: Mapping[str, Any], op_str: str, path: str
    ) -> ColumnElement[bool] | None:
        """Compile logical operators (AND, OR, NOT).

        Returns None if not a logical operator.
        """
        if op_str == CriteriaOperator.AND:
            return and_(*self._compile_conditions(data, path))

        if op_str == CriteriaOperator.OR:
            return or_(*self._compile_conditions(data, path))

        if op_str == CriteriaOperator.NOT:
            if "condition" in data and not data.get("conditions"):
                return not_(
                    self._compile_node(data["condition"], path=f"{path}.condition")
                )
            return not_(and_(*self._compile_conditions(data, path)))

        return None

    def _compile_conditions(
        self, data: Mapping[str, Any], path: str
    ) -> list[ColumnElement[bool]]:
        conditions = data.get("conditions")
        if not conditions or not isinstance(conditions, list):
            raise ValidationError(
                f"Logical operator '{data.get('op')}' requires 'conditions' list",
                path=path,
            )
        return [
            self._compile_node(c, path=f"{path}.conditions[{idx}]")
            for idx, c in enumerate(conditions)
        ]

    def _compile_leaf_node(
        self, data: Mapping[str, Any], op_str: str, path: str
    ) -> ColumnElement[bool]:
        """Compile leaf node (attribute-based conditions)."""
        attr = data.get("attr")
        if not attr or not isinstance(attr, str):
            raise ValidationError(f"Criteria node missing 'attr': {data}", path=path)
        try:
            op = CriteriaOperator(op_str)
        except ValueError:
            raise OperatorNotFoundError(op_str, _VALID_OPERATORS) from None

        return self._registry.apply(op, self._resolve_column(attr), data.get("val"))

    # ------------------------------------------------------------------ #
    # Columns                                                             #
    # ------------------------------------------------------------------ #

    def _table_clause(self, name: str) -> TableClause:
        clause = self._tables.get(name)
        if clause is None:
            columns = self._catalog.table(name).column_names()
            clause = table(
                quoted_name(name, True),
                *(column(quoted_name(c, True)) for c in columns),
            )
            self._tables[name] = clause
        return clause

    def _resolve_column(self, attr: str) -> ColumnElement[Any]:
        table_name, _, column_name = attr.rpartition(".")
        table_name = table_name or self._table
        try:
            definition = self._catalog.table(table_name)
        except TableNotFoundError:
            raise FieldNotFoundError(
                table_name, "<schema>", self._catalog.tables, full_path=attr
            ) from None

        attribute = definition.attributes.get(column_name)
        if attribute is None:
            raise FieldNotFoundError(
                column_name, table_name, list(definition.attributes), full_path=attr
            )
        if attribute.collection:
            raise FieldNotQueryableError(
                column_name, table_name, definition.column_names(), full_path=attr
            )
        return self._table_clause(table_name).c[column_name]

    # ------------------------------------------------------------------ #
    # Sort and pagination                                                 #
    # ------------------------------------------------------------------ #

    def _apply_sort(
        self, stmt: Select[Any], sort: Mapping[str, Any] | None
    ) -> Select[Any]:
        if not sort:
            return stmt
        clauses = []
        for attr, direction in sort.items():
            target = self._resolve_column(attr)
            if SortDirection.parse(direction) is SortDirection.DESC:
                clauses.append(desc(target))
            else:
                clauses.append(asc(target))
        return stmt.order_by(*clauses)

    def _apply_pagination(
        self, stmt: Select[Any], skip: Any, limit: Any
    ) -> Select[Any]:
        if limit is not None:
            stmt = stmt.limit(self._literal_int(limit, "limit"))
        if skip is not None:
            stmt = stmt.offset(self._literal_int(skip, "skip"))
        return stmt

    @staticmethod
    def _literal_int(value: Any, name: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError(
                f"'{name}' must be a non-negative integer, got {value!r}", path=name
            )
        return value
