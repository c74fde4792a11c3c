"""
mapval - Structural validation of nested maps, lists and scalars.

Usage:
    from mapval import IsEqual, KeyMissing, Strict, validate

    schema = Strict({
        "a": IsEqual(1),
        "b": KeyMissing,
    })

    results = validate(schema, {"a": 1, "c": 2})
    results.valid     # False
    [str(e) for e in results.errors()]
    # ["@path 'c': unexpected field encountered during strict validation"]
"""

from .context import is_strict, validation_context
from .is_defs import (
    Is,
    IsAll,
    IsAny,
    IsDef,
    IsDuration,
    IsEqual,
    IsEqualToValue,
    IsIntGt,
    IsNil,
    IsNonEmptyString,
    IsStringContaining,
    IsStringMatching,
    IsType,
    KeyMissing,
    KeyPresent,
    Optional,
    to_def,
)
from .results import Results, ValueResultError
from .schema import Each, EachNode, Lax, MapNode, SliceNode, Strict, to_node
from .types import MISSING, VALID_VR, ValueResult
from .walk import Compose, Composed, Validator, compile, validate

__all__ = [
    # Result types
    "ValueResult",
    "VALID_VR",
    "MISSING",
    "Results",
    "ValueResultError",
    # Predicates
    "IsDef",
    "Is",
    "IsAny",
    "IsAll",
    "IsEqual",
    "IsEqualToValue",
    "IsType",
    "IsStringContaining",
    "IsStringMatching",
    "IsNonEmptyString",
    "IsIntGt",
    "IsNil",
    "IsDuration",
    "KeyPresent",
    "KeyMissing",
    "Optional",
    "to_def",
    # Schema
    "MapNode",
    "SliceNode",
    "EachNode",
    "Strict",
    "Lax",
    "Each",
    "to_node",
    # Walking
    "Validator",
    "compile",
    "validate",
    "Compose",
    "Composed",
    # Config
    "validation_context",
    "is_strict",
]
