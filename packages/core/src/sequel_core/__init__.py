"""sequel-core — schema catalog, identifier quoting and the exception root."""

from __future__ import annotations

from .escaping import IdentifierEscaper, IEscaper, qualify
from .exceptions import (
    DialectNotSupportedError,
    PrimaryKeyError,
    SchemaError,
    SequelError,
    TableNotFoundError,
)
from .schema import AttributeDefinition, SchemaCatalog, TableDefinition

__all__ = [
    # Schema
    "AttributeDefinition",
    "SchemaCatalog",
    "TableDefinition",
    # Escaping
    "IEscaper",
    "IdentifierEscaper",
    "qualify",
    # Exceptions
    "SequelError",
    "SchemaError",
    "TableNotFoundError",
    "PrimaryKeyError",
    "DialectNotSupportedError",
]
