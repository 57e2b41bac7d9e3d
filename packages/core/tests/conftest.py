"""Shared fixtures for sequel-core tests."""

from __future__ import annotations

import pytest

from sequel_core import SchemaCatalog


@pytest.fixture
def catalog() -> SchemaCatalog:
    return SchemaCatalog.from_dict(
        {
            "user": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "name": {"type": "string"},
                    "email": {"type": "string", "unique": True},
                    "posts": {"collection": "post", "via": "author"},
                }
            },
            "tag": {
                "id": {"type": "integer", "primaryKey": True},
                "label": "string",
            },
        }
    )
