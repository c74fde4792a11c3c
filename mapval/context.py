"""
Context manager for validation configuration (e.g., strict mode).
"""

from contextlib import contextmanager
from contextvars import ContextVar

# Default strictness for map levels that don't declare their own
_strict_mode: ContextVar[bool] = ContextVar("mapval_strict_mode", default=False)


def is_strict() -> bool:
    """Check if strict mode is the current default."""
    return _strict_mode.get()


@contextmanager
def validation_context(*, strict: bool = False):
    """
    Context manager for validation configuration.

    Args:
        strict: If True, map levels without an explicit policy fail on keys
               that the schema doesn't declare. Levels built with Strict()
               or Lax() keep their own policy.

    Example:
        from mapval import validate, validation_context

        schema = {"id": IsNonEmptyString}

        # Normal: extra keys are ignored
        validate(schema, {"id": "x", "extra": 1}).valid  # True

        # Strict: "extra" is reported as unexpected
        with validation_context(strict=True):
            validate(schema, {"id": "x", "extra": 1}).valid  # False
    """
    token = _strict_mode.set(strict)
    try:
        yield
    finally:
        _strict_mode.reset(token)
