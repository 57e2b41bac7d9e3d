"""Default-sort synthesis and trailing-connector trimming."""

from __future__ import annotations

import logging

from sequel_core.schema import SchemaCatalog
from sequel_criteria.criteria import SortDirection

from .query_spec import QuerySpec

logger = logging.getLogger(__name__)

_TRAILING_CONNECTORS = ("AND ", "OR ")


def with_default_sort(
    spec: QuerySpec,
    catalog: SchemaCatalog,
    table: str,
    direction: SortDirection,
) -> QuerySpec:
    """
    Return ``spec`` with a sort on the table's primary key if it has none.

    A spec that already carries a sort (even an empty one) is returned
    unchanged.  Raises :class:`~sequel_core.exceptions.PrimaryKeyError` when
    the table does not declare exactly one primary key.
    """
    if spec.has_sort:
        return spec
    pk = catalog.primary_key_of(table)
    logger.debug("Synthesized default sort %s %s for %s", pk, direction.sql, table)
    return spec.with_sort({pk: direction})


def strip_trailing_connector(text: str) -> str:
    """Strip one trailing ``"AND "`` then one trailing ``"OR "``, if present."""
    for token in _TRAILING_CONNECTORS:
        if text.endswith(token):
            text = text[: -len(token)]
    return text
