"""Shared fixtures for where-compiler tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator

import pytest
from sqlalchemy import Connection, create_engine

from sequel_core import SchemaCatalog
from sequel_where import (
    ChildOwnsKey,
    JoinStep,
    Junction,
    ParentOwnsKey,
    QuerySpec,
    WhereCompiler,
)


@pytest.fixture
def catalog() -> SchemaCatalog:
    return SchemaCatalog.from_dict(
        {
            "user": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "name": {"type": "string"},
                    "age": {"type": "integer"},
                    "posts": {"collection": "post"},
                }
            },
            "profile": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "user_id": {"type": "integer"},
                    "bio": {"type": "string"},
                }
            },
            "post": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "title": {"type": "string"},
                    "author": {"type": "integer"},
                    "comments": {"collection": "comment"},
                    "tags": {"collection": "tag"},
                }
            },
            "comment": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "post_id": {"type": "integer"},
                    "body": {"type": "string"},
                    "approved": {"type": "boolean"},
                }
            },
            "tag": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "label": {"type": "string"},
                    "posts": {"collection": "post"},
                }
            },
            "post_tag": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "post_id": {"type": "integer"},
                    "tag_id": {"type": "integer"},
                }
            },
            "audit": {"attributes": {"message": "string"}},
        }
    )


@pytest.fixture
def user_compiler(catalog) -> WhereCompiler:
    return WhereCompiler(catalog, "user")


@pytest.fixture
def post_compiler(catalog) -> WhereCompiler:
    return WhereCompiler(catalog, "post")


@pytest.fixture
def profile_join() -> ParentOwnsKey:
    return ParentOwnsKey(
        name="profile", step=JoinStep("user", "id", "profile", "user_id")
    )


@pytest.fixture
def author_join() -> ParentOwnsKey:
    return ParentOwnsKey(name="author", step=JoinStep("post", "author", "user", "id"))


@pytest.fixture
def comments_of() -> Callable[[QuerySpec | None], ChildOwnsKey]:
    """Build the post to comment association with the given criteria."""

    def build(criteria: QuerySpec | None = None) -> ChildOwnsKey:
        return ChildOwnsKey(
            name="comments",
            step=JoinStep("post", "id", "comment", "post_id", criteria=criteria),
        )

    return build


@pytest.fixture
def tags_of() -> Callable[[QuerySpec | None], Junction]:
    """Build the post to tag association through post_tag."""

    def build(criteria: QuerySpec | None = None) -> Junction:
        return Junction(
            name="tags",
            link=JoinStep("post", "id", "post_tag", "post_id"),
            target=JoinStep("post_tag", "tag_id", "tag", "id", criteria=criteria),
        )

    return build


@pytest.fixture
def sqlite_db() -> Iterator[Connection]:
    """In-memory SQLite database holding three ``user`` rows."""
    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        conn.exec_driver_sql(
            'CREATE TABLE "user" (id INTEGER PRIMARY KEY, name TEXT, age INTEGER)'
        )
        conn.exec_driver_sql(
            'INSERT INTO "user" (id, name, age) VALUES '
            "(1, 'ann', 30), (2, 'bob', 40), (3, 'cy', 50)"
        )
        yield conn
    engine.dispose()
