"""
Value predicates for mapval.

Provides the IsDef node and factory functions that return IsDef instances.
Every predicate is total: checking a value always produces a ValueResult.
"""

from __future__ import annotations

import logging
import numbers
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import timedelta
from functools import lru_cache
from typing import Any, Callable

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from .types import (
    KEY_MISSING_VR,
    KEY_SHOULD_BE_MISSING_VR,
    VALID_VR,
    ValueResult,
    ValueValidator,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IsDef:
    """
    Immutable value predicate.

    The leaf of every schema. Wraps a checker function with the metadata the
    walker needs to handle absent keys.
    """

    name: str
    checker: Callable[[Any], ValueResult] | None = None
    check_key_missing: bool = False
    optional: bool = False

    def check(self, value: Any, key_exists: bool = True) -> ValueResult:
        """
        Check a value.

        Args:
            value: The actual value (None when the key is absent)
            key_exists: Whether the key was present in the enclosing map

        Returns:
            A ValueResult; never raises
        """
        if self.check_key_missing:
            return KEY_SHOULD_BE_MISSING_VR if key_exists else VALID_VR

        if not key_exists:
            return VALID_VR if self.optional else KEY_MISSING_VR

        if self.checker is None:
            return VALID_VR

        try:
            return self.checker(value)
        except Exception as e:
            logger.debug("predicate %r raised on %r", self.name, value, exc_info=True)
            return ValueResult(
                False, f"{self.name}: check raised {type(e).__name__}: {e}"
            )

    def __or__(self, other: Any) -> IsDef:
        """
        Combine with OR logic.

        Usage:
            IsNil | IsIntGt(0)
        """
        return IsAny(self, other)

    def __ror__(self, other: Any) -> IsDef:
        return IsAny(other, self)

    def __and__(self, other: Any) -> IsDef:
        """
        Combine with AND logic.

        Usage:
            IsType(str) & IsStringContaining("@")
        """
        return IsAll(self, other)

    def __rand__(self, other: Any) -> IsDef:
        return IsAll(other, self)


def to_def(v: Any) -> IsDef:
    """
    Coerce a value to an IsDef.

    Conversion rules:
        IsDef -> pass through
        type -> IsType(type)
        anything else -> IsEqual(value)
    """
    if isinstance(v, IsDef):
        return v
    if isinstance(v, type):
        return IsType(v)
    return IsEqual(v)


def Is(name: str, fn: ValueValidator) -> IsDef:
    """
    Wrap a raw checking function into a named predicate.

    The function may return a ValueResult or a truthy/falsy value. Exceptions
    raised by the function, or by testing its result, are reported as a failed
    result by IsDef.check.

    Usage:
        Is("is even", lambda x: x % 2 == 0)
    """

    def checker(v: Any) -> ValueResult:
        out = fn(v)
        if isinstance(out, ValueResult):
            return out
        if out:
            return VALID_VR
        return ValueResult(False, f"{name} failed for value {v!r}")

    return IsDef(name=name, checker=checker)


# Checks that the key is in the map, even if its value is None
KeyPresent = IsDef(name="check key present")

# Checks that the key is not in the map
KeyMissing = IsDef(name="check key not present", check_key_missing=True)


def Optional(v: Any) -> IsDef:
    """
    Allow the key to be absent, validate the value if present.

    Usage:
        Optional(IsIntGt(0))
    """
    return replace(to_def(v), optional=True)


def IsAny(*of: Any) -> IsDef:
    """
    Combine predicates with a logical OR.

    Candidates are checked in order and the first valid result wins. An
    absent key is accepted if any candidate accepts one.
    """
    if not of:
        raise ValueError("IsAny requires at least one predicate")

    defs = [to_def(d) for d in of]
    names = [d.name for d in defs]

    def check(v: Any) -> ValueResult:
        for d in defs:
            vr = d.check(v, True)
            if vr.valid:
                return vr

        return ValueResult(
            False, f"Value was none of {names!r}, actual value was {v!r}"
        )

    return IsDef(
        name=f"either {names!r}",
        checker=check,
        optional=any(d.optional or d.check_key_missing for d in defs),
    )


def IsAll(*of: Any) -> IsDef:
    """Combine predicates with a logical AND. The first failure is returned."""
    if not of:
        raise ValueError("IsAll requires at least one predicate")

    defs = [to_def(d) for d in of]

    def check(v: Any) -> ValueResult:
        for d in defs:
            vr = d.check(v, True)
            if not vr.valid:
                return vr
        return VALID_VR

    return IsDef(
        name=f"all of {[d.name for d in defs]!r}",
        checker=check,
        optional=all(d.optional or d.check_key_missing for d in defs),
    )


def _typed_keys(d: dict) -> set:
    return {(type(k), k) for k in d}


def _objects_are_equal(actual: Any, expected: Any) -> bool:
    """Deep equality that also requires identical types at every level."""
    if type(actual) is not type(expected):
        return False

    if isinstance(expected, dict):
        return _typed_keys(actual) == _typed_keys(expected) and all(
            _objects_are_equal(actual[k], expected[k]) for k in expected
        )

    if isinstance(expected, (list, tuple)):
        return len(actual) == len(expected) and all(
            _objects_are_equal(a, e) for a, e in zip(actual, expected)
        )

    return bool(actual == expected)


def _is_number(v: Any) -> bool:
    return isinstance(v, numbers.Number) and not isinstance(v, bool)


@lru_cache(maxsize=None)
def _adapter_for(tp: type) -> TypeAdapter:
    return TypeAdapter(tp)


def _values_are_equal(actual: Any, expected: Any) -> bool:
    """Deep equality that tolerates numeric and representation differences."""
    if _objects_are_equal(actual, expected):
        return True

    if isinstance(expected, Mapping) and isinstance(actual, Mapping):
        return actual.keys() == expected.keys() and all(
            _values_are_equal(actual[k], expected[k]) for k in expected
        )

    if isinstance(expected, (list, tuple)) and isinstance(actual, (list, tuple)):
        return len(actual) == len(expected) and all(
            _values_are_equal(a, e) for a, e in zip(actual, expected)
        )

    # bool never converts to or from other types
    if isinstance(actual, bool) or isinstance(expected, bool):
        return False

    if _is_number(actual) and _is_number(expected):
        return bool(actual == expected)

    try:
        coerced = _adapter_for(type(expected)).validate_python(actual)
    except (ValidationError, PydanticSchemaGenerationError):
        return False
    return _objects_are_equal(coerced, expected)


def IsEqual(to: Any) -> IsDef:
    """Validate deep equality, including the type of every value."""

    def check(v: Any) -> ValueResult:
        if _objects_are_equal(v, to):
            return VALID_VR
        return ValueResult(
            False, f"objects not equal: actual({v!r}) != expected({to!r})"
        )

    return Is("equals", check)


def IsEqualToValue(to: Any) -> IsDef:
    """
    Validate deep equality by value.

    Numbers compare by magnitude (1 == 1.0). Other scalars are coerced to the
    expected value's type before comparing.
    """

    def check(v: Any) -> ValueResult:
        if _values_are_equal(v, to):
            return VALID_VR
        return ValueResult(
            False, f"values not equal: actual({v!r}) != expected({to!r})"
        )

    return Is("equals", check)


def IsType(t: type) -> IsDef:
    """Validate that the value is an instance of type."""

    def check(v: Any) -> ValueResult:
        if isinstance(v, t):
            return VALID_VR
        return ValueResult(
            False, f"Expected {t.__name__}, got '{v}' which is a {type(v).__name__}"
        )

    return Is(f"is a {t.__name__}", check)


def IsStringContaining(needle: str) -> IsDef:
    """Validate that the value is a string containing the substring."""

    def check(v: Any) -> ValueResult:
        if not isinstance(v, str):
            return ValueResult(False, f"Unable to convert '{v}' to string")

        if needle not in v:
            return ValueResult(
                False, f"String '{v}' did not contain substring '{needle}'"
            )

        return VALID_VR

    return Is("is string containing", check)


def IsStringMatching(pattern: str) -> IsDef:
    """
    Validate that the value is a string matching a regex (re.search).

    Usage:
        IsStringMatching(r"^\\d{3}-\\d{4}$")
    """
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise ValueError(f"Invalid pattern: {pattern}") from e

    def check(v: Any) -> ValueResult:
        if not isinstance(v, str):
            return ValueResult(False, f"Unable to convert '{v}' to string")

        if compiled.search(v) is None:
            return ValueResult(
                False, f"String '{v}' did not match pattern '{pattern}'"
            )

        return VALID_VR

    return Is("is string matching", check)


def _non_empty_string(v: Any) -> ValueResult:
    if not isinstance(v, str):
        return ValueResult(False, f"Unable to convert '{v}' to string")
    if v == "":
        return ValueResult(False, "String was empty")
    return VALID_VR


IsNonEmptyString = Is("is a non-empty string", _non_empty_string)


def _duration(v: Any) -> ValueResult:
    if isinstance(v, timedelta):
        return VALID_VR
    return ValueResult(
        False, f"Expected a timedelta, got '{v}' which is a {type(v).__name__}"
    )


IsDuration = Is("is a duration", _duration)


def _nil(v: Any) -> ValueResult:
    if v is None:
        return VALID_VR
    return ValueResult(False, f"Value {v!r} is not nil")


IsNil = Is("is nil", _nil)


def IsIntGt(than: int) -> IsDef:
    """Validate that the value is an int greater than `than`."""

    def check(v: Any) -> ValueResult:
        if not isinstance(v, int) or isinstance(v, bool):
            return ValueResult(
                False, f"{v!r} is a {type(v).__name__}, but was expecting an int!"
            )

        if v > than:
            return VALID_VR

        return ValueResult(False, f"{v} is not greater than {than}")

    return Is("greater than", check)
