"""
Schema tree nodes for mapval.

A schema node is a leaf IsDef, a MapNode of keys to child nodes, a SliceNode
matching a sequence position by position, or an EachNode matching every
element of a sequence against one node.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Union

from .is_defs import IsDef, to_def


@dataclass(frozen=True, slots=True)
class MapNode:
    """
    Schema for a keyed mapping.

    strict:
        True  - actual keys not declared in fields are failures
        False - undeclared keys are ignored
        None  - inherit from the enclosing level (or validation_context at the root)
    """

    fields: dict[Any, Node]
    strict: bool | None = None


@dataclass(frozen=True, slots=True)
class SliceNode:
    """Schema for a sequence, matched element by element with an exact length."""

    items: tuple[Node, ...]


@dataclass(frozen=True, slots=True)
class EachNode:
    """Schema applied to every element of a sequence."""

    item: Node
    min_length: int | None = None
    max_length: int | None = None


Node = Union[IsDef, MapNode, SliceNode, EachNode]


def to_node(v: Any) -> Node:
    """
    Coerce a value to a schema node.

    Conversion rules:
        IsDef | MapNode | SliceNode | EachNode -> pass through
        Validator -> its compiled node, keeping an explicit strict policy
        dict -> MapNode with recursive conversion
        list | tuple -> SliceNode with recursive conversion
        type -> IsType(type)
        anything else -> IsEqual(value)

    Raises:
        TypeError: for a Composed, which can only run at the root
    """
    from .walk import Composed, Validator

    if isinstance(v, (IsDef, MapNode, SliceNode, EachNode)):
        return v

    if isinstance(v, Validator):
        node = v.node
        if isinstance(node, MapNode) and node.strict is None and v.strict is not None:
            return replace(node, strict=v.strict)
        return node

    if isinstance(v, Composed):
        raise TypeError(
            "Compose() results cannot be nested in a schema; nest its schemas instead"
        )

    if isinstance(v, dict):
        return MapNode(fields={k: to_node(val) for k, val in v.items()})

    if isinstance(v, (list, tuple)):
        return SliceNode(items=tuple(to_node(item) for item in v))

    return to_def(v)


def _as_map(v: Any, caller: str) -> MapNode:
    node = to_node(v)
    if not isinstance(node, MapNode):
        raise TypeError(f"{caller}() requires a map schema, got {type(v).__name__}")
    return node


def Strict(v: dict | MapNode) -> MapNode:
    """
    Fail on undeclared keys at this level and at nested levels that don't
    declare their own policy.

    Usage:
        Strict({"id": IsNonEmptyString, "tags": Each(str)})
    """
    return replace(_as_map(v, "Strict"), strict=True)


def Lax(v: dict | MapNode) -> MapNode:
    """Ignore undeclared keys at this level, even under a strict parent."""
    return replace(_as_map(v, "Lax"), strict=False)


def Each(
    v: Any, min_length: int | None = None, max_length: int | None = None
) -> EachNode:
    """
    Validate every element of a sequence against the same schema.

    Usage:
        Each({"id": IsIntGt(0)})
        Each(str, min_length=1)
    """
    return EachNode(item=to_node(v), min_length=min_length, max_length=max_length)
