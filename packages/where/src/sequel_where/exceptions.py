"""Where-compiler exceptions."""

from __future__ import annotations

from typing import Any

from sequel_criteria.exceptions import ValidationError


class InstructionError(ValidationError):
    """
    Malformed association instructions.

    Raised when a legacy instruction dictionary names an unknown strategy,
    carries the wrong number of join steps, or misses a required key, and
    when a ``QuerySpec`` is built with duplicate association names.
    """

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INSTRUCTION_ERROR",
            "message": self.message,
            "path": self.path,
        }
