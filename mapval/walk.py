"""
Tree walker for mapval.

Walks an actual value tree in lock-step with a schema tree and records every
outcome into a Results object. The walk never stops early on a failure.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel

from .context import is_strict
from .is_defs import IsDef
from .results import Results
from .schema import EachNode, MapNode, Node, SliceNode, to_node
from .types import KEY_MISSING_VR, MISSING, STRICT_FAILURE_VR, Path, ValueResult

# Path segments collected during the walk, dot-joined when recorded
Segments = tuple[Any, ...]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Validator:
    """
    A compiled schema, ready to validate values.

    Stateless: the same Validator can check any number of values, each run
    producing its own Results.
    """

    node: Node
    strict: bool | None = None

    def __call__(self, actual: Any) -> Results:
        results = Results()
        strict = is_strict() if self.strict is None else self.strict

        _walk(self.node, actual, (), results, strict)

        logger.debug(
            "validated %d results across %d paths (valid=%s)",
            len(results),
            len(results.fields),
            results.valid,
        )
        return results


def compile(schema: Any, strict: bool | None = None) -> Validator:
    """
    Compile a schema into a Validator.

    Args:
        schema: Schema tree; dicts, lists and plain values are coerced by to_node
        strict: Policy for the root level. None uses validation_context.

    Usage:
        check_event = compile({
            "monitor": {"id": IsNonEmptyString, "duration": IsDuration},
            "error": KeyMissing,
        })
        results = check_event(event)
    """
    if isinstance(schema, Validator):
        return schema if strict is None else replace(schema, strict=strict)
    return Validator(node=to_node(schema), strict=strict)


def validate(schema: Any, actual: Any, strict: bool | None = None) -> Results:
    """
    Validate a value against a schema.

    Returns:
        Results holding every outcome, keyed by dotted path

    Usage:
        results = validate({"a": IsEqual(1), "b": KeyMissing}, {"a": 1})
        assert results.valid
    """
    return compile(schema, strict=strict)(actual)


@dataclass(frozen=True, slots=True)
class Composed:
    """Several validators run against the same value, results merged."""

    validators: tuple[Validator, ...]

    def __call__(self, actual: Any) -> Results:
        results = Results()
        for v in self.validators:
            results.merge(v(actual))
        return results


def Compose(*validators: Any) -> Composed:
    """
    Run several schemas against the same value and merge their results.

    A Composed runs at the root only; it cannot be nested inside a schema.

    Usage:
        check = Compose(base_fields, {"http": {"status": 200}})
    """
    return Composed(validators=tuple(compile(v) for v in validators))


def _dotted(path: Segments) -> Path:
    return ".".join(str(segment) for segment in path)


def _walk(
    node: Node, actual: Any, path: Segments, results: Results, strict: bool
) -> None:
    if isinstance(node, IsDef):
        key_exists = actual is not MISSING
        value = actual if key_exists else None
        results.record(_dotted(path), node.check(value, key_exists))
    elif isinstance(node, MapNode):
        _walk_map(node, actual, path, results, strict)
    elif isinstance(node, SliceNode):
        _walk_slice(node, actual, path, results, strict)
    elif isinstance(node, EachNode):
        _walk_each(node, actual, path, results, strict)
    else:
        raise TypeError(f"Cannot walk schema node of type {type(node).__name__}")


def _type_mismatch(expected: str, actual: Any) -> ValueResult:
    return ValueResult(False, f"expected a {expected}, got type {type(actual).__name__}")


def _walk_map(
    node: MapNode, actual: Any, path: Segments, results: Results, strict: bool
) -> None:
    if node.strict is not None:
        strict = node.strict

    if actual is MISSING:
        results.record(_dotted(path), KEY_MISSING_VR)
        return

    if isinstance(actual, BaseModel):
        actual = actual.model_dump()

    if not isinstance(actual, Mapping):
        results.record(_dotted(path), _type_mismatch("map", actual))
        return

    for key, child in node.fields.items():
        value = actual[key] if key in actual else MISSING
        _walk(child, value, (*path, key), results, strict)

    if strict:
        for key in actual:
            if key not in node.fields:
                results.record(_dotted((*path, key)), STRICT_FAILURE_VR)


def _walk_slice(
    node: SliceNode, actual: Any, path: Segments, results: Results, strict: bool
) -> None:
    where = _dotted(path)

    if actual is MISSING:
        results.record(where, KEY_MISSING_VR)
        return

    if not isinstance(actual, (list, tuple)):
        results.record(where, _type_mismatch("list", actual))
        return

    if len(actual) != len(node.items):
        results.record(
            where,
            ValueResult(
                False, f"expected {len(node.items)} elements, got {len(actual)}"
            ),
        )

    # Only the overlapping prefix can be matched position by position
    for i, (child, value) in enumerate(zip(node.items, actual)):
        _walk(child, value, (*path, i), results, strict)


def _walk_each(
    node: EachNode, actual: Any, path: Segments, results: Results, strict: bool
) -> None:
    where = _dotted(path)

    if actual is MISSING:
        results.record(where, KEY_MISSING_VR)
        return

    if not isinstance(actual, (list, tuple)):
        results.record(where, _type_mismatch("list", actual))
        return

    n = len(actual)
    if node.min_length is not None and n < node.min_length:
        results.record(
            where, ValueResult(False, f"List too short: {n} < {node.min_length}")
        )
    if node.max_length is not None and n > node.max_length:
        results.record(
            where, ValueResult(False, f"List too long: {n} > {node.max_length}")
        )

    for i, value in enumerate(actual):
        _walk(node.item, value, (*path, i), results, strict)
