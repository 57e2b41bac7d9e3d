"""Positional paramstyles for compiled criteria.

Bind markers are rendered by SQLAlchemy: the compiler clones the target
dialect with one of the positional paramstyles below and reads the bound
values back from the compiled statement.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .exceptions import CriteriaError

if TYPE_CHECKING:
    from sqlalchemy.engine.interfaces import Dialect

PARAMSTYLES: frozenset[str] = frozenset({"qmark", "numeric_dollar", "format"})

_NUMERIC_DOLLAR = re.compile(r"\$(\d+)")


def check_paramstyle(paramstyle: str) -> str:
    if paramstyle not in PARAMSTYLES:
        raise CriteriaError(
            f"Unsupported paramstyle: '{paramstyle}'. "
            f"Supported: {', '.join(sorted(PARAMSTYLES))}"
        )
    return paramstyle


def positional_dialect(dialect: Dialect, paramstyle: str) -> Dialect:
    """
    Return a fresh instance of *dialect*'s class using *paramstyle*.

    The identifier quoting rules are the class's own, so quoting stays
    identical to the escaper the dialect came from.

    Raises:
        CriteriaError: If *paramstyle* is not a supported positional style.
    """
    return type(dialect)(paramstyle=check_paramstyle(paramstyle))


def shift_numeric_markers(statement: str, start: int) -> str:
    """Renumber ``$n`` markers so the first one becomes ``$start``."""
    if start == 1:
        return statement
    return _NUMERIC_DOLLAR.sub(
        lambda match: f"${int(match.group(1)) + start - 1}", statement
    )
