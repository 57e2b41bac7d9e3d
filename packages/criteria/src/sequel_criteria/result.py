"""ParsedCriteria — the output of criteria compilation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ParsedCriteria:
    """
    Compiled criteria for one table.

    Attributes:
        query: Filter, ``ORDER BY`` and ``LIMIT``/``OFFSET`` text as
            rendered by the dialect, without a leading ``WHERE``.  A
            top-level ``OR`` is parenthesised so the filter can be
            ``AND``-ed onto other conditions.
        values: Bound values, in positional order.
    """

    query: str = ""
    values: list[Any] = field(default_factory=list)
