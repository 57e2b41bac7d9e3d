"""Root and schema exceptions for sequel.

All exceptions inherit from ``SequelError`` and provide ``to_dict()`` for
API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class SequelError(Exception):
    """Root exception for the entire sequel toolkit."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class SchemaError(SequelError):
    """Base class for schema catalog errors."""


class TableNotFoundError(SchemaError):
    """
    Unknown table requested from the schema catalog.

    Provides fuzzy-matched suggestions for likely intended tables.
    """

    def __init__(self, table: str, available_tables: list[str]) -> None:
        self.table = table
        self.available_tables = available_tables
        self.suggestions = get_close_matches(table, available_tables, n=3, cutoff=0.6)

        message = f"Unknown table: '{table}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "TABLE_NOT_FOUND",
            "table": self.table,
            "suggestions": self.suggestions,
            "available_tables": sorted(self.available_tables),
        }


class PrimaryKeyError(SchemaError):
    """A table does not declare exactly one primary-key attribute."""

    def __init__(self, table: str, candidates: list[str]) -> None:
        self.table = table
        self.candidates = candidates
        if candidates:
            message = (
                f"Table '{table}' declares {len(candidates)} primary keys "
                f"({', '.join(candidates)}); exactly one is required"
            )
        else:
            message = f"Table '{table}' declares no primary key"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "PRIMARY_KEY_ERROR",
            "table": self.table,
            "candidates": self.candidates,
        }


class DialectNotSupportedError(SequelError):
    """Identifier quoting was requested for an unknown dialect name."""

    def __init__(self, dialect: str, supported: list[str]) -> None:
        self.dialect = dialect
        self.supported = supported
        super().__init__(
            f"Unsupported dialect: '{dialect}'. "
            f"Supported dialects: {', '.join(sorted(supported))}"
        )
