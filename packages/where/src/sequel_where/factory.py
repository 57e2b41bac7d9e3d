"""
QuerySpecFactory — build a QuerySpec from the legacy dictionary shape.

Legacy shape::

    {
        "where": {...}, "sort": {...}, "skip": 0, "limit": 10,
        "instructions": {
            "<association>": {
                "strategy": {"strategy": 2},
                "instructions": [
                    {"parent": "post", "parentKey": "id",
                     "child": "comment", "childKey": "post_id",
                     "criteria": {...}},
                ],
            },
        },
    }

``strategy`` may also be a bare int, a digit string, or a strategy name
(``"child_owns_key"``, ``"viaFK"``, ...).  Dictionary order of
``instructions`` becomes the association order.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .exceptions import InstructionError
from .instructions import (
    Association,
    ChildOwnsKey,
    JoinStep,
    JoinStrategy,
    Junction,
    ParentOwnsKey,
)
from .query_spec import QuerySpec

_STRATEGY_ALIASES: dict[str, JoinStrategy] = {
    "parent_owns_key": JoinStrategy.PARENT_OWNS_KEY,
    "parentfk": JoinStrategy.PARENT_OWNS_KEY,
    "hasfk": JoinStrategy.PARENT_OWNS_KEY,
    "child_owns_key": JoinStrategy.CHILD_OWNS_KEY,
    "childfk": JoinStrategy.CHILD_OWNS_KEY,
    "viafk": JoinStrategy.CHILD_OWNS_KEY,
    "junction": JoinStrategy.JUNCTION,
    "viajunctor": JoinStrategy.JUNCTION,
}

_STEP_COUNTS: dict[JoinStrategy, int] = {
    JoinStrategy.PARENT_OWNS_KEY: 1,
    JoinStrategy.CHILD_OWNS_KEY: 1,
    JoinStrategy.JUNCTION: 2,
}

_STEP_KEYS = ("parent", "parentKey", "child", "childKey")


class QuerySpecFactory:
    """
    Parses and validates legacy query dictionaries.

    Supports:
    - ``from_dict(data)`` — parse, failing fast with :class:`InstructionError`
    - ``validate(data)``  — collect every problem without raising
    """

    # ------------------------------------------------------------------ #
    # Public API                                                          #
    # ------------------------------------------------------------------ #

    @staticmethod
    def from_dict(data: Mapping[str, Any] | None) -> QuerySpec:
        """Create a QuerySpec from a legacy query dictionary."""
        if data is None:
            return QuerySpec()
        errors: list[tuple[str, str]] = []
        QuerySpecFactory._collect_errors(data, errors, path="<root>")
        if errors:
            path, message = errors[0]
            raise InstructionError(message, path=path)
        return QuerySpecFactory._build(data)

    @staticmethod
    def validate(data: Any) -> list[str]:
        """
        Validate a legacy query dictionary and return a list of error messages.

        Returns an empty list when the structure is valid.
        """
        errors: list[tuple[str, str]] = []
        QuerySpecFactory._collect_errors(data, errors, path="<root>")
        return [f"{path}: {message}" for path, message in errors]

    @staticmethod
    def resolve_strategy(value: Any) -> JoinStrategy | None:
        """Map any accepted strategy encoding to a ``JoinStrategy``."""
        if isinstance(value, Mapping):
            value = value.get("strategy")
        if isinstance(value, JoinStrategy):
            return value
        if isinstance(value, str):
            key = value.strip()
            if key.isdigit():
                value = int(key)
            else:
                return _STRATEGY_ALIASES.get(key.lower())
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return JoinStrategy(value)
            except ValueError:
                return None
        return None

    # ------------------------------------------------------------------ #
    # Internal: build                                                     #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build(data: Mapping[str, Any]) -> QuerySpec:
        instructions = data.get("instructions") or {}
        associations = tuple(
            QuerySpecFactory._build_association(name, instruction)
            for name, instruction in instructions.items()
        )
        return QuerySpec(
            where=data.get("where"),
            sort=data.get("sort"),
            skip=data.get("skip"),
            limit=data.get("limit"),
            associations=associations,
        )

    @staticmethod
    def _build_association(name: str, instruction: Mapping[str, Any]) -> Association:
        strategy = QuerySpecFactory.resolve_strategy(instruction.get("strategy"))
        steps = [QuerySpecFactory._build_step(s) for s in instruction["instructions"]]
        if strategy is JoinStrategy.PARENT_OWNS_KEY:
            return ParentOwnsKey(name=name, step=steps[0])
        if strategy is JoinStrategy.CHILD_OWNS_KEY:
            return ChildOwnsKey(name=name, step=steps[0])
        return Junction(name=name, link=steps[0], target=steps[1])

    @staticmethod
    def _build_step(data: Mapping[str, Any]) -> JoinStep:
        criteria = data.get("criteria")
        return JoinStep(
            parent_table=data["parent"],
            parent_key=data["parentKey"],
            child_table=data["child"],
            child_key=data["childKey"],
            criteria=None if criteria is None else QuerySpecFactory._build(criteria),
        )

    # ------------------------------------------------------------------ #
    # Internal: validation                                                #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _collect_errors(
        data: Any, errors: list[tuple[str, str]], *, path: str
    ) -> None:
        """Recursive error collection (non-throwing)."""
        if not isinstance(data, Mapping):
            errors.append((path, f"expected dict, got {type(data).__name__}"))
            return

        where = data.get("where")
        if where is not None and not isinstance(where, Mapping):
            errors.append((f"{path}.where", "'where' must be a dict"))
        sort = data.get("sort")
        if sort is not None and not isinstance(sort, Mapping):
            errors.append((f"{path}.sort", "'sort' must be a dict"))

        instructions = data.get("instructions")
        if instructions is None:
            return
        if not isinstance(instructions, Mapping):
            errors.append((f"{path}.instructions", "'instructions' must be a dict"))
            return
        for name, instruction in instructions.items():
            QuerySpecFactory._collect_association_errors(
                instruction, errors, path=f"{path}.instructions.{name}"
            )

    @staticmethod
    def _collect_association_errors(
        data: Any, errors: list[tuple[str, str]], *, path: str
    ) -> None:
        if not isinstance(data, Mapping):
            errors.append((path, f"expected dict, got {type(data).__name__}"))
            return

        strategy = QuerySpecFactory.resolve_strategy(data.get("strategy"))
        if strategy is None:
            errors.append(
                (f"{path}.strategy", f"unknown strategy {data.get('strategy')!r}")
            )

        steps = data.get("instructions")
        if not isinstance(steps, list | tuple):
            errors.append((f"{path}.instructions", "'instructions' must be a list"))
            return
        if strategy is not None and len(steps) != _STEP_COUNTS[strategy]:
            errors.append(
                (
                    f"{path}.instructions",
                    f"strategy '{strategy.name.lower()}' requires "
                    f"{_STEP_COUNTS[strategy]} join step(s), got {len(steps)}",
                )
            )
        for idx, step in enumerate(steps):
            QuerySpecFactory._collect_step_errors(
                step, errors, path=f"{path}.instructions[{idx}]"
            )

    @staticmethod
    def _collect_step_errors(
        data: Any, errors: list[tuple[str, str]], *, path: str
    ) -> None:
        if not isinstance(data, Mapping):
            errors.append((path, f"expected dict, got {type(data).__name__}"))
            return
        for key in _STEP_KEYS:
            value = data.get(key)
            if not value or not isinstance(value, str):
                errors.append((path, f"missing '{key}'"))
        criteria = data.get("criteria")
        if criteria is not None:
            QuerySpecFactory._collect_errors(criteria, errors, path=f"{path}.criteria")
