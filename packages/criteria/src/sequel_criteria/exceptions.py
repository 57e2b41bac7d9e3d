"""
Criteria exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``CriteriaError`` (itself a ``SequelError``)
and provide ``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any

from sequel_core.exceptions import SequelError


class CriteriaError(SequelError):
    """Base exception for all criteria compilation errors."""


class ValidationError(CriteriaError):
    """Criteria structure validation failed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "VALIDATION_ERROR",
            "message": self.message,
            "path": self.path,
        }


class OperatorNotFoundError(CriteriaError):
    """
    Unknown operator or modifier specified.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    def __init__(self, operator: str, valid_operators: list[str]) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.6)

        message = f"Unknown operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(sorted(valid_operators)[:10])}..."
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATOR_NOT_FOUND",
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": sorted(self.valid_operators),
        }


class FieldNotFoundError(CriteriaError):
    """
    Invalid attribute reference with helpful suggestions.

    Example error message::

        Invalid field 'nme' on 'user'.
        Did you mean one of these?
          • name

        Available fields: email, id, name
    """

    def __init__(
        self,
        invalid_field: str,
        table: str,
        available_fields: list[str],
        full_path: str | None = None,
        cutoff: float = 0.6,
    ) -> None:
        self.invalid_field = invalid_field
        self.table = table
        self.available_fields = available_fields
        self.full_path = full_path or invalid_field

        self.suggestions = get_close_matches(
            invalid_field, available_fields, n=5, cutoff=cutoff
        )

        super().__init__(self._build_message())

    def _build_message(self) -> str:
        lines = [f"Invalid field '{self.invalid_field}' on '{self.table}'."]
        if self.suggestions:
            lines.append("Did you mean one of these?")
            for s in self.suggestions:
                lines.append(f"  • {s}")

        sorted_fields = sorted(self.available_fields)
        preview = ", ".join(sorted_fields[:15])
        if len(sorted_fields) > 15:
            preview += ", ..."
        lines.append(f"Available fields: {preview}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_FOUND",
            "field": self.invalid_field,
            "table": self.table,
            "full_path": self.full_path,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }


class FieldNotQueryableError(ValidationError):
    """
    Error when trying to filter or sort on an attribute that exists but is
    a collection (association) with no column of its own.
    """

    def __init__(
        self,
        field: str,
        table: str,
        available_fields: list[str],
        full_path: str | None = None,
    ) -> None:
        self.field = field
        self.table = table
        self.available_fields = available_fields
        self.full_path = full_path or field
        self.suggestions = get_close_matches(field, available_fields, n=3, cutoff=0.6)

        message = (
            f"Field '{field}' on '{table}' exists but is not "
            f"queryable (it is a collection attribute). "
            f"Full path: '{self.full_path}'"
        )
        if self.suggestions:
            message += f"\nDid you mean: {', '.join(self.suggestions)}?"
        super().__init__(message, path=full_path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "FIELD_NOT_QUERYABLE",
            "field": self.field,
            "table": self.table,
            "full_path": self.full_path,
            "suggestions": self.suggestions,
            "available_fields": sorted(self.available_fields),
        }
