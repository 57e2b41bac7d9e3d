"""
Tests for WhereCompiler.single.

Covers:
- flat LEFT OUTER JOINs for parent-owned keys
- default sort synthesis without mutating the input
- WHERE prefixing, values and pagination
- pluggable criteria compilers and escapers
"""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any

import pytest

from sequel_core import IdentifierEscaper, PrimaryKeyError
from sequel_criteria import CriteriaError, FieldNotFoundError, SortDirection
from sequel_where import (
    CompiledQuery,
    JoinStep,
    ParentOwnsKey,
    QuerySpec,
    WhereCompilation,
    WhereCompiler,
)

PROFILE_JOIN = 'LEFT OUTER JOIN "profile" ON "user"."id" = "profile"."user_id" '


class _StubCriteriaCompiler:
    """Returns a fixed query text and values regardless of input."""

    def __init__(self, query: str, values: Any) -> None:
        self.query = query
        self.values = values
        self.received: list[Any] = []

    def compile(self, criteria: Any) -> SimpleNamespace:
        self.received.append(criteria)
        return SimpleNamespace(query=self.query, values=self.values)


def _stubbed(catalog, query: str, values: Any = None) -> WhereCompiler:
    stub = _StubCriteriaCompiler(query, values)
    return WhereCompiler(catalog, "user", criteria_factory=lambda table, cat, **_: stub)


# ---------------------------------------------------------------------------
# Joins
# ---------------------------------------------------------------------------


def test_no_associations_emit_no_join(user_compiler):
    result = user_compiler.single(QuerySpec(where={"name": "foo"}))
    assert "JOIN" not in result.query
    assert result.query == 'WHERE "user"."name" = ? ORDER BY "user"."id" DESC'
    assert result.values == ["foo"]


def test_parent_owned_key_becomes_left_outer_join(user_compiler, profile_join):
    result = user_compiler.single(QuerySpec(associations=(profile_join,)))
    assert result.query.count(PROFILE_JOIN) == 1
    assert result.query == PROFILE_JOIN + 'ORDER BY "user"."id" DESC'


def test_joins_precede_where(user_compiler, profile_join):
    result = user_compiler.single(
        QuerySpec(where={"age": {">": 30}}, associations=(profile_join,))
    )
    assert result.query == (
        PROFILE_JOIN + 'WHERE "user"."age" > ? ORDER BY "user"."id" DESC'
    )
    assert result.values == [30]


def test_multiple_joins_keep_association_order(post_compiler, author_join):
    editor = ParentOwnsKey(
        name="editor", step=JoinStep("post", "title", "user", "name")
    )
    result = post_compiler.single(
        QuerySpec(sort={}, associations=(editor, author_join))
    )
    assert result.query == (
        'LEFT OUTER JOIN "user" ON "post"."title" = "user"."name" '
        'LEFT OUTER JOIN "user" ON "post"."author" = "user"."id" '
    )


def test_subquery_associations_contribute_nothing(
    post_compiler, author_join, comments_of, tags_of
):
    with_children = post_compiler.single(
        QuerySpec(associations=(comments_of(), author_join, tags_of()))
    )
    without_children = post_compiler.single(QuerySpec(associations=(author_join,)))
    assert with_children.query == without_children.query
    assert with_children.query.count("JOIN") == 1


# ---------------------------------------------------------------------------
# Default sort
# ---------------------------------------------------------------------------


def test_default_sort_is_primary_key_descending(user_compiler):
    spec = QuerySpec()
    result = user_compiler.single(spec)
    assert result.query == 'ORDER BY "user"."id" DESC'
    assert result.spec.sort == {"id": SortDirection.DESC}
    assert len(result.spec.sort) == 1


def test_input_spec_is_not_mutated(user_compiler, profile_join):
    spec = QuerySpec(where={"name": "foo"}, associations=(profile_join,))
    result = user_compiler.single(spec)
    assert spec.sort is None
    assert spec.associations == (profile_join,)
    assert result.spec is not spec
    assert result.spec.associations == spec.associations


def test_explicit_sort_is_kept(user_compiler):
    spec = QuerySpec(sort={"name": 1, "age": "desc"})
    result = user_compiler.single(spec)
    assert result.query == 'ORDER BY "user"."name" ASC, "user"."age" DESC'
    assert result.spec is spec


def test_empty_sort_counts_as_given(user_compiler):
    result = user_compiler.single(QuerySpec(sort={}))
    assert result.query == ""
    assert result.spec.sort == {}


def test_missing_primary_key_propagates(catalog):
    compiler = WhereCompiler(catalog, "audit")
    with pytest.raises(PrimaryKeyError):
        compiler.single(QuerySpec())
    # An explicit sort needs no primary key
    assert compiler.single(QuerySpec(sort={"message": 1})).query == (
        'ORDER BY "audit"."message" ASC'
    )


# ---------------------------------------------------------------------------
# Filter, values and pagination
# ---------------------------------------------------------------------------


def test_empty_where_has_no_prefix(user_compiler):
    result = user_compiler.single(QuerySpec(where={}, limit=5))
    assert not result.query.startswith("WHERE")
    assert result.query == 'ORDER BY "user"."id" DESC LIMIT ?'
    assert result.values == [5]


def test_pagination(user_compiler):
    result = user_compiler.single(QuerySpec(skip=20, limit=10))
    assert result.query == 'ORDER BY "user"."id" DESC LIMIT ? OFFSET ?'
    assert result.values == [10, 20]


def test_values_match_markers(user_compiler):
    result = user_compiler.single(
        QuerySpec(where={"or": [{"name": "a"}, {"age": [1, 2, 3]}]})
    )
    assert result.query.count("?") == len(result.values) == 4
    assert result.values == ["a", 1, 2, 3]


def test_none_spec_compiles_to_empty(user_compiler):
    assert user_compiler.single(None) == CompiledQuery()
    assert user_compiler.single(None).values == []


def test_criteria_errors_propagate(user_compiler):
    with pytest.raises(FieldNotFoundError):
        user_compiler.single(QuerySpec(where={"nme": "foo"}))


def test_numeric_paramstyle(catalog):
    compiler = WhereCompiler(catalog, "user", paramstyle="numeric_dollar")
    result = compiler.single(QuerySpec(where={"name": "a", "age": 3}))
    assert result.query == (
        'WHERE "user"."name" = $1 AND "user"."age" = $2 ORDER BY "user"."id" DESC'
    )


def test_unknown_paramstyle(catalog):
    with pytest.raises(CriteriaError, match="Unsupported paramstyle"):
        WhereCompiler(catalog, "user", paramstyle="pyformat")


def test_skip_without_limit_runs_on_sqlite(catalog, sqlite_db):
    compiler = WhereCompiler(catalog, "user", escaper=IdentifierEscaper("sqlite"))
    result = compiler.single(QuerySpec(where={"age": {">": 20}}, skip=1))
    assert result.query == (
        'WHERE "user"."age" > ? ORDER BY "user"."id" DESC LIMIT ? OFFSET ?'
    )
    assert result.values == [20, -1, 1]
    rows = sqlite_db.exec_driver_sql(
        'SELECT "user"."id" FROM "user" ' + result.query, tuple(result.values)
    )
    assert list(rows.scalars()) == [2, 1]


def test_dialect_escaper(catalog, profile_join):
    compiler = WhereCompiler(catalog, "user", escaper=IdentifierEscaper("mysql"))
    result = compiler.single(QuerySpec(associations=(profile_join,)))
    assert result.query == (
        "LEFT OUTER JOIN `profile` ON `user`.`id` = `profile`.`user_id` "
        "ORDER BY `user`.`id` DESC"
    )


# ---------------------------------------------------------------------------
# Pluggable criteria compiler
# ---------------------------------------------------------------------------


def test_criteria_compiler_receives_spec_without_associations(catalog, profile_join):
    stub = _StubCriteriaCompiler("", [])
    compiler = WhereCompiler(catalog, "user", criteria_factory=lambda t, c, **_: stub)
    compiler.single(QuerySpec(where={"name": "x"}, associations=(profile_join,)))
    (received,) = stub.received
    assert received.where == {"name": "x"}
    assert received.sort == {"id": SortDirection.DESC}
    assert not hasattr(received, "associations")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('"a" = ? AND ', 'WHERE "a" = ? '),
        ('"a" = ? OR ', 'WHERE "a" = ? '),
        ('"a" = ? AND OR ', 'WHERE "a" = ? AND '),
        ('"a" = ?', 'WHERE "a" = ?'),
    ],
)
def test_trailing_connector_is_trimmed(catalog, text, expected):
    compiler = _stubbed(catalog, text, [1])
    assert compiler.single(QuerySpec(where={"a": 1})).query == expected


@pytest.mark.parametrize("values", [None, "abc", 42, {"a": 1}])
def test_non_sequence_values_become_empty(catalog, values):
    compiler = _stubbed(catalog, '"a" = ?', values)
    assert compiler.single(QuerySpec(where={"a": 1})).values == []


def test_tuple_values_become_list(catalog):
    compiler = _stubbed(catalog, '"a" = ?', (1,))
    assert compiler.single(QuerySpec(where={"a": 1})).values == [1]


# ---------------------------------------------------------------------------
# Combined output and logging
# ---------------------------------------------------------------------------


def test_compile_runs_both_passes(post_compiler, author_join, comments_of):
    result = post_compiler.compile(
        QuerySpec(where={"title": "x"}, associations=(author_join, comments_of()))
    )
    assert isinstance(result, WhereCompilation)
    assert "LEFT OUTER JOIN" in result.single.query
    assert [s.association_name for s in result.subqueries] == ["comments"]


def test_debug_logging(user_compiler, profile_join, caplog):
    with caplog.at_level(logging.DEBUG, logger="sequel_where"):
        user_compiler.single(QuerySpec(associations=(profile_join,)))
    messages = [r.getMessage() for r in caplog.records]
    assert "Compiled user with 1 join(s) and 0 value(s)" in messages
    assert "Synthesized default sort id DESC for user" in messages
