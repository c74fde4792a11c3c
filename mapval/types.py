"""
Type definitions for mapval.

Provides the ValueResult record, the MISSING sentinel, and type aliases.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union


@dataclass(frozen=True, slots=True)
class ValueResult:
    """Outcome of checking a single value: pass/fail plus an explanation."""

    valid: bool
    message: str = ""


# Shared result for the common "valid, nothing to say" case
VALID_VR = ValueResult(True)

KEY_MISSING_VR = ValueResult(False, "expected this key to be present")

KEY_SHOULD_BE_MISSING_VR = ValueResult(False, "this key should not exist")

STRICT_FAILURE_VR = ValueResult(
    False, "unexpected field encountered during strict validation"
)


class _Missing(Enum):
    """
    Sentinel for a key that is absent from the actual value.

    Distinct from None, which is a present value.
    """

    MISSING = 0

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing.MISSING


# Type aliases
ValueValidator = Callable[[Any], Union[ValueResult, bool]]
Path = str
