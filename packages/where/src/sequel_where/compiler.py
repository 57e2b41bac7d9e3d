"""
Compile a ``QuerySpec`` with associations into SQL fragments.

Two outputs are produced from the same spec:

``single``
    The parent query: one ``LEFT OUTER JOIN`` per ``ParentOwnsKey``
    association followed by the filter, sort and pagination text.

``complex``
    One correlated subquery template per ``ChildOwnsKey`` or ``Junction``
    association.  Each template carries a single placeholder marker that
    the caller replaces with the parent row's key, so every child
    collection keeps its own filter, sort and pagination.

Filter text is delegated to a criteria compiler obtained per table from
``criteria_factory``; identifiers go through the escaper.  Compilation is
pure: the caller's spec is never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol

from sequel_core.escaping import IdentifierEscaper, qualify
from sequel_criteria.compiler import CriteriaCompiler
from sequel_criteria.criteria import SortDirection
from sequel_criteria.params import check_paramstyle

from .defaults import strip_trailing_connector, with_default_sort
from .instructions import ChildOwnsKey, JoinStep, Junction, ParentOwnsKey
from .query_spec import QuerySpec
from .results import CompiledQuery, SubqueryDescriptor, WhereCompilation

if TYPE_CHECKING:
    from sequel_core.escaping import IEscaper
    from sequel_core.schema import SchemaCatalog
    from sequel_criteria.compiler import ICriteriaCompiler
    from sequel_criteria.result import ParsedCriteria

logger = logging.getLogger(__name__)


class CriteriaFactory(Protocol):
    """
    Build the criteria compiler for one table.

    *start_index* is the number the first ``numeric_dollar`` marker of the
    compiled text must carry.
    """

    def __call__(
        self, table: str, catalog: SchemaCatalog, *, start_index: int = 1
    ) -> ICriteriaCompiler: ...


class WhereCompiler:
    """
    Where/join compiler for one parent table.

    Args:
        catalog: Schema catalog for every table a QuerySpec touches.
        table: The parent table.
        escaper: Identifier escaper; defaults to :class:`IdentifierEscaper`.
        criteria_factory: A :class:`CriteriaFactory`; the default builds a
            :class:`CriteriaCompiler` sharing this compiler's escaper and
            paramstyle.
        paramstyle: Bind marker style for the default criteria compiler.
        placeholder: Marker for the parent key in subquery templates.
        alias_prefix: Prefix for the junction key alias.

    Raises:
        CriteriaError: If *paramstyle* is not supported.
    """

    def __init__(
        self,
        catalog: SchemaCatalog,
        table: str,
        *,
        escaper: IEscaper | None = None,
        criteria_factory: CriteriaFactory | None = None,
        paramstyle: str = "qmark",
        placeholder: str = "^?^",
        alias_prefix: str = "___",
    ) -> None:
        self._catalog = catalog
        self._table = table
        self._escaper = escaper or IdentifierEscaper()
        self._criteria_factory = criteria_factory or self._default_criteria_factory
        self._paramstyle = check_paramstyle(paramstyle)
        self._placeholder = placeholder
        self._alias_prefix = alias_prefix

    @property
    def table(self) -> str:
        return self._table

    @property
    def placeholder(self) -> str:
        return self._placeholder

    def compile(self, spec: QuerySpec | None) -> WhereCompilation:
        """
        Compile the parent query and its subqueries.

        Subquery markers continue the numbering of the parent query, so the
        values of ``single`` followed by each descriptor's values line up
        with the ``numeric_dollar`` markers of the embedded statement.
        """
        single = self.single(spec)
        subqueries = self.complex(spec, start_index=len(single.values) + 1)
        return WhereCompilation(single=single, subqueries=subqueries)

    # ------------------------------------------------------------------ #
    # Flat joins                                                          #
    # ------------------------------------------------------------------ #

    def single(self, spec: QuerySpec | None) -> CompiledQuery:
        """Compile the parent query with its ``ParentOwnsKey`` joins."""
        if spec is None:
            return CompiledQuery()

        joins = [
            self._left_outer_join(association.step)
            for association in spec.associations
            if isinstance(association, ParentOwnsKey)
        ]
        query = " ".join(joins) + " " if joins else ""

        spec = with_default_sort(spec, self._catalog, self._table, SortDirection.DESC)
        if spec.has_where:
            query += "WHERE "

        parsed = self._criteria_factory(self._table, self._catalog).compile(
            spec.criteria()
        )
        query = strip_trailing_connector(query + parsed.query)
        values = _values_of(parsed)

        logger.debug(
            "Compiled %s with %d join(s) and %d value(s)",
            self._table,
            len(joins),
            len(values),
        )
        return CompiledQuery(query=query, values=values, spec=spec)

    def _left_outer_join(self, step: JoinStep) -> str:
        return (
            f"LEFT OUTER JOIN {self._escaper.escape(step.child_table)}"
            f" ON {qualify(self._escaper, step.parent_table, step.parent_key)}"
            f" = {qualify(self._escaper, step.child_table, step.child_key)}"
        )

    # ------------------------------------------------------------------ #
    # Correlated subqueries                                               #
    # ------------------------------------------------------------------ #

    def complex(
        self, spec: QuerySpec | None, *, start_index: int = 1
    ) -> list[SubqueryDescriptor]:
        """
        Compile one subquery per ``ChildOwnsKey`` or ``Junction`` association.

        Markers are numbered from *start_index* and keep counting across
        descriptors in association order.
        """
        if spec is None:
            return []

        descriptors: list[SubqueryDescriptor] = []
        for association in spec.associations:
            if isinstance(association, ChildOwnsKey):
                descriptor = self._child_subquery(association, start_index)
            elif isinstance(association, Junction):
                descriptor = self._junction_subquery(association, start_index)
            else:
                continue
            logger.debug(
                "Compiled %s subquery for %s.%s",
                association.strategy.name.lower(),
                self._table,
                association.name,
            )
            descriptors.append(descriptor)
            start_index += len(descriptor.values)
        return descriptors

    def _child_subquery(
        self, association: ChildOwnsKey, start_index: int
    ) -> SubqueryDescriptor:
        step = association.step
        criteria, parsed = self._compile_nested(step, start_index)
        head = (
            f"SELECT * FROM {self._escaper.escape(step.child_table)}"
            f" WHERE {self._escaper.escape(step.child_key)} = {self._placeholder}"
        )
        return SubqueryDescriptor(
            query_template=f"({_append_nested(head, criteria, parsed)})",
            association=association,
            values=_values_of(parsed),
            criteria=criteria,
            placeholder=self._placeholder,
        )

    def _junction_subquery(
        self, association: Junction, start_index: int
    ) -> SubqueryDescriptor:
        link, target = association.link, association.target
        criteria, parsed = self._compile_nested(target, start_index)

        escape = self._escaper.escape
        columns = [
            qualify(self._escaper, target.child_table, column)
            for column in self._catalog.table(target.child_table).column_names()
        ]
        alias = escape(f"{self._alias_prefix}{link.child_key}")
        link_key = qualify(self._escaper, link.child_table, link.child_key)
        columns.append(f"{link_key} AS {alias}")

        target_key = qualify(self._escaper, target.child_table, target.child_key)
        head = (
            f"SELECT {', '.join(columns)}"
            f" FROM {escape(target.child_table)}"
            f" INNER JOIN {escape(link.child_table)}"
            f" ON {qualify(self._escaper, target.parent_table, target.parent_key)}"
            f" = {target_key}"
            f" WHERE {target_key} IN"
            f" (SELECT {qualify(self._escaper, link.child_table, target.parent_key)}"
            f" FROM {escape(link.child_table)}"
            f" WHERE {link_key} = {self._placeholder})"
        )
        return SubqueryDescriptor(
            query_template=f"({_append_nested(head, criteria, parsed)})",
            association=association,
            values=_values_of(parsed),
            criteria=criteria,
            placeholder=self._placeholder,
        )

    def _compile_nested(
        self, step: JoinStep, start_index: int
    ) -> tuple[QuerySpec, ParsedCriteria]:
        # Nested associations are not followed
        criteria = with_default_sort(
            step.criteria or QuerySpec(),
            self._catalog,
            step.child_table,
            SortDirection.ASC,
        )
        compiler = self._criteria_factory(
            step.child_table, self._catalog, start_index=start_index
        )
        parsed = compiler.compile(criteria.criteria())
        return criteria, parsed

    # ------------------------------------------------------------------ #
    # Helpers                                                             #
    # ------------------------------------------------------------------ #

    def _default_criteria_factory(
        self, table: str, catalog: SchemaCatalog, *, start_index: int = 1
    ) -> ICriteriaCompiler:
        # Criteria text takes its quoting from the IdentifierEscaper dialect
        escaper = (
            self._escaper if isinstance(self._escaper, IdentifierEscaper) else None
        )
        return CriteriaCompiler(
            table,
            catalog,
            escaper=escaper,
            paramstyle=self._paramstyle,
            start_index=start_index,
        )


def _append_nested(head: str, criteria: QuerySpec, parsed: ParsedCriteria) -> str:
    text = parsed.query
    if not text:
        return head
    if criteria.has_where:
        return f"{head} AND {text}"
    return f"{head} {text}"


def _values_of(parsed: Any) -> list[Any]:
    values = getattr(parsed, "values", None)
    if isinstance(values, Sequence) and not isinstance(values, str | bytes):
        return list(values)
    return []
