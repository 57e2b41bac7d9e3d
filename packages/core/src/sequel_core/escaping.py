"""
Identifier quoting backed by SQLAlchemy dialect preparers.

Every table and column name emitted by the compilers goes through an
:class:`IEscaper`.  The default implementation always quotes (unlike
SQLAlchemy's own rendering, which only quotes when required) so that
reserved words such as ``user`` are always safe.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.engine.default import DefaultDialect
from sqlalchemy.engine.interfaces import Dialect

from .exceptions import DialectNotSupportedError

_DIALECTS: dict[str, Callable[[], Dialect]] = {
    "default": DefaultDialect,
    "postgresql": postgresql.dialect,
    "sqlite": sqlite.dialect,
    "mysql": mysql.dialect,
}


@runtime_checkable
class IEscaper(Protocol):
    """Protocol for identifier escaping."""

    def escape(self, name: str) -> str:
        """Return *name* quoted for the target dialect."""
        ...


class IdentifierEscaper:
    """
    Quote identifiers using the quoting rules of a SQLAlchemy dialect.

    Args:
        dialect: A SQLAlchemy ``Dialect`` instance or one of
            ``"default"``, ``"postgresql"``, ``"sqlite"``, ``"mysql"``.
    """

    def __init__(self, dialect: Dialect | str = "default") -> None:
        if isinstance(dialect, str):
            factory = _DIALECTS.get(dialect.lower())
            if factory is None:
                raise DialectNotSupportedError(dialect, list(_DIALECTS))
            dialect = factory()
        self._dialect = dialect
        self._preparer = dialect.identifier_preparer

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def escape(self, name: str) -> str:
        return self._preparer.quote_identifier(name)

    __call__ = escape

    def qualify(self, table: str, column: str) -> str:
        """Render ``table.column`` with both parts quoted."""
        return qualify(self, table, column)


def qualify(escaper: IEscaper, table: str, column: str) -> str:
    """Render ``table.column`` through any :class:`IEscaper`."""
    return f"{escaper.escape(table)}.{escaper.escape(column)}"
