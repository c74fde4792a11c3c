"""
Assertion helpers for using mapval inside test suites.
"""

from typing import Any

from .results import Results
from .walk import compile


def _render(results: Results) -> str:
    return "\n".join(sorted(str(e) for e in results.errors()))


def assert_valid(schema: Any, actual: Any, strict: bool | None = None) -> Results:
    """
    Assert that a value matches a schema.

    Raises:
        AssertionError: listing every failed path, sorted by path

    Example:
        def test_event(event):
            assert_valid({"monitor": {"status": "up"}}, event)
    """
    results = compile(schema, strict=strict)(actual)
    if not results.valid:
        raise AssertionError(f"value did not match schema:\n{_render(results)}")
    return results


def assert_invalid(schema: Any, actual: Any, strict: bool | None = None) -> Results:
    """Assert that a value does not match a schema. Returns the failed Results."""
    results = compile(schema, strict=strict)(actual)
    if results.valid:
        raise AssertionError("value unexpectedly matched schema")
    return results
