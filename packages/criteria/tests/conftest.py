"""Shared fixtures for criteria tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import Connection, create_engine

from sequel_core import SchemaCatalog
from sequel_criteria import CriteriaCompiler


@pytest.fixture
def catalog() -> SchemaCatalog:
    return SchemaCatalog.from_dict(
        {
            "user": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "name": {"type": "string"},
                    "age": {"type": "integer"},
                    "email": {"type": "string"},
                    "posts": {"collection": "post"},
                }
            },
            "post": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "title": {"type": "string"},
                    "author": {"type": "integer"},
                    "approved": {"type": "boolean"},
                }
            },
        }
    )


@pytest.fixture
def compiler(catalog) -> CriteriaCompiler:
    """Compiler for the ``user`` table with default settings."""
    return CriteriaCompiler("user", catalog)


@pytest.fixture
def sqlite_db() -> Iterator[Connection]:
    """In-memory SQLite database holding three ``user`` rows."""
    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        conn.exec_driver_sql(
            'CREATE TABLE "user" '
            "(id INTEGER PRIMARY KEY, name TEXT, age INTEGER, email TEXT)"
        )
        conn.exec_driver_sql(
            'INSERT INTO "user" (id, name, age, email) VALUES '
            "(1, 'ann', 30, 'ann@example.com'), "
            "(2, 'bob', 40, NULL), "
            "(3, 'cy', 50, 'cy@example.com')"
        )
        yield conn
    engine.dispose()
