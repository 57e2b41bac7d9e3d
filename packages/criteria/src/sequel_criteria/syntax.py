"""WhereSyntax — normalise legacy ``where`` mappings into operator nodes.

Legacy criteria look like::

    where: {
        name: 'foo',
        age: {'>': 25},
        like: {name: '%foo%'},
        or: [{like: {foo: '%foo%'}}, {like: {bar: '%bar%'}}],
        type: ['a', 'b'],
    }

and are normalised into the node format the compiler walks::

    {"op": "and", "conditions": [
        {"op": "=", "attr": "name", "val": "foo"},
        {"op": ">", "attr": "age", "val": 25},
        ...
    ]}

A mapping that already carries an ``op`` key is treated as a node tree and
returned unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .exceptions import OperatorNotFoundError, ValidationError
from .operators import CriteriaOperator

# Map legacy modifier names to CriteriaOperator values
_MODIFIERS: dict[str, CriteriaOperator] = {
    "<": CriteriaOperator.LT,
    "lessthan": CriteriaOperator.LT,
    "<=": CriteriaOperator.LE,
    "lessthanorequal": CriteriaOperator.LE,
    ">": CriteriaOperator.GT,
    "greaterthan": CriteriaOperator.GT,
    ">=": CriteriaOperator.GE,
    "greaterthanorequal": CriteriaOperator.GE,
    "!": CriteriaOperator.NE,
    "not": CriteriaOperator.NE,
    "like": CriteriaOperator.LIKE,
    "contains": CriteriaOperator.CONTAINS,
    "startswith": CriteriaOperator.STARTSWITH,
    "endswith": CriteriaOperator.ENDSWITH,
    "in": CriteriaOperator.IN,
    "nin": CriteriaOperator.NOT_IN,
}

# Modifier spellings offered in suggestions
_MODIFIER_NAMES: list[str] = [
    "<",
    "lessThan",
    "<=",
    "lessThanOrEqual",
    ">",
    "greaterThan",
    ">=",
    "greaterThanOrEqual",
    "!",
    "not",
    "like",
    "contains",
    "startsWith",
    "endsWith",
    "in",
    "nin",
]

_LOGICAL_KEYS: frozenset[str] = frozenset({"and", "or"})


def _is_list(value: Any) -> bool:
    return isinstance(value, (list, tuple))


class WhereSyntax:
    """Parse a legacy where mapping into a criteria node tree."""

    def parse_where(self, where: Mapping[str, Any] | None) -> dict[str, Any]:
        if not where:
            return {}
        if not isinstance(where, Mapping):
            raise ValidationError(
                f"Expected a mapping, got {type(where).__name__}", path="where"
            )
        if "op" in where:
            return dict(where)
        return self._group(self._parse_mapping(where, path="where"))

    # -- Internal --------------------------------------------------------------

    def _group(
        self,
        conditions: list[dict[str, Any]],
        op: CriteriaOperator = CriteriaOperator.AND,
    ) -> dict[str, Any]:
        if len(conditions) == 1 and op is CriteriaOperator.AND:
            return conditions[0]
        return {"op": op.value, "conditions": conditions}

    def _parse_mapping(
        self, where: Mapping[str, Any], *, path: str
    ) -> list[dict[str, Any]]:
        conditions: list[dict[str, Any]] = []
        for key, value in where.items():
            key_path = f"{path}.{key}"
            lowered = key.lower()
            if lowered in _LOGICAL_KEYS:
                conditions.append(self._parse_logical(lowered, value, path=key_path))
            elif lowered == "like":
                conditions.extend(self._parse_like(value, path=key_path))
            else:
                conditions.extend(self._parse_attribute(key, value, path=key_path))
        return conditions

    def _parse_logical(self, key: str, value: Any, *, path: str) -> dict[str, Any]:
        if not _is_list(value) or not value:
            raise ValidationError(
                f"Logical operator '{key}' requires a non-empty list", path=path
            )
        branches: list[dict[str, Any]] = []
        for idx, branch in enumerate(value):
            if not isinstance(branch, Mapping):
                raise ValidationError(
                    f"Expected a mapping, got {type(branch).__name__}",
                    path=f"{path}[{idx}]",
                )
            branch_conditions = self._parse_mapping(branch, path=f"{path}[{idx}]")
            if not branch_conditions:
                raise ValidationError("Empty condition", path=f"{path}[{idx}]")
            branches.append(self._group(branch_conditions))
        return self._group(branches, CriteriaOperator(key))

    def _parse_like(self, value: Any, *, path: str) -> list[dict[str, Any]]:
        if not isinstance(value, Mapping):
            raise ValidationError(
                "'like' requires a mapping of attribute to pattern", path=path
            )
        if not value:
            raise ValidationError("Empty condition", path=path)
        return [
            {"op": CriteriaOperator.LIKE.value, "attr": attr, "val": pattern}
            for attr, pattern in value.items()
        ]

    def _parse_attribute(
        self, attr: str, value: Any, *, path: str
    ) -> list[dict[str, Any]]:
        if isinstance(value, Mapping):
            if not value:
                raise ValidationError("Empty modifier mapping", path=path)
            return [
                self._parse_modifier(attr, modifier, operand, path=path)
                for modifier, operand in value.items()
            ]
        if value is None:
            return [{"op": CriteriaOperator.IS_NULL.value, "attr": attr, "val": None}]
        if _is_list(value):
            return [{"op": CriteriaOperator.IN.value, "attr": attr, "val": list(value)}]
        return [{"op": CriteriaOperator.EQ.value, "attr": attr, "val": value}]

    def _parse_modifier(
        self, attr: str, modifier: str, operand: Any, *, path: str
    ) -> dict[str, Any]:
        op = _MODIFIERS.get(modifier.lower())
        if op is None:
            raise OperatorNotFoundError(modifier, _MODIFIER_NAMES)
        if op is CriteriaOperator.NE:
            if operand is None:
                op = CriteriaOperator.IS_NOT_NULL
            elif _is_list(operand):
                op = CriteriaOperator.NOT_IN
        if op in (CriteriaOperator.IN, CriteriaOperator.NOT_IN):
            operand = list(operand) if _is_list(operand) else [operand]
        return {"op": op.value, "attr": attr, "val": operand}
