"""
Read-only schema catalog.

Maps a table name to its attribute definitions.  Attributes carry the two
flags the compilers care about: ``primary_key`` and ``collection`` (an
association attribute that has no column of its own).

The catalog is built once and never mutated afterwards, so a single
instance can be shared by any number of concurrent compilations.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import PrimaryKeyError, TableNotFoundError


class AttributeDefinition(BaseModel):
    """Immutable definition of a single table attribute."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    type: str | None = None
    primary_key: bool = Field(default=False, alias="primaryKey")
    collection: bool = False
    unique: bool = False

    @field_validator("collection", mode="before")
    @classmethod
    def _coerce_collection(cls, value: Any) -> bool:
        # Legacy schemas store the related model name, not a boolean.
        return value is not None and value is not False


class TableDefinition(BaseModel):
    """Immutable definition of a table and its ordered attributes."""

    model_config = ConfigDict(frozen=True)

    name: str
    attributes: dict[str, AttributeDefinition] = Field(default_factory=dict)

    @property
    def primary_key(self) -> str:
        """Name of the unique primary-key attribute."""
        candidates = [
            name for name, attr in self.attributes.items() if attr.primary_key
        ]
        if len(candidates) != 1:
            raise PrimaryKeyError(self.name, candidates)
        return candidates[0]

    def column_names(self) -> list[str]:
        """Attributes that map to real columns, in declaration order."""
        return [name for name, attr in self.attributes.items() if not attr.collection]

    def collection_names(self) -> list[str]:
        return [name for name, attr in self.attributes.items() if attr.collection]


class SchemaCatalog(Mapping[str, TableDefinition]):
    """
    Read-only mapping of table name to :class:`TableDefinition`.

    Example::

        catalog = SchemaCatalog.from_dict({
            "user": {
                "attributes": {
                    "id": {"type": "integer", "primaryKey": True},
                    "name": {"type": "string"},
                    "posts": {"collection": "post"},
                }
            }
        })
        catalog.primary_key_of("user")  # "id"
    """

    def __init__(self, tables: Mapping[str, TableDefinition] | None = None) -> None:
        self._tables: Mapping[str, TableDefinition] = MappingProxyType(
            dict(tables or {})
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SchemaCatalog:
        """
        Build a catalog from the legacy ``{table: {"attributes": {...}}}`` shape.

        A bare attribute mapping (without the ``attributes`` wrapper) is
        accepted as well.
        """
        tables: dict[str, TableDefinition] = {}
        for name, definition in data.items():
            if isinstance(definition, TableDefinition):
                tables[name] = definition
                continue
            attributes = definition.get("attributes", definition)
            tables[name] = TableDefinition(
                name=name,
                attributes={
                    # Shorthand: ``"name": "string"``
                    attr: {"type": spec} if isinstance(spec, str) else spec
                    for attr, spec in attributes.items()
                },
            )
        return cls(tables)

    # -- Mapping protocol ----------------------------------------------------

    def __getitem__(self, name: str) -> TableDefinition:
        return self.table(name)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    # -- Lookups -------------------------------------------------------------

    @property
    def tables(self) -> list[str]:
        return list(self._tables)

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def table(self, name: str) -> TableDefinition:
        try:
            return self._tables[name]
        except KeyError:
            raise TableNotFoundError(name, list(self._tables)) from None

    def attributes_of(self, name: str) -> Mapping[str, AttributeDefinition]:
        """Attribute definitions of *name*, in declaration order."""
        return MappingProxyType(self.table(name).attributes)

    def primary_key_of(self, name: str) -> str:
        return self.table(name).primary_key
