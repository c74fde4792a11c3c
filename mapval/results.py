"""
Result set for mapval.

Results is a flattened map (using dotted paths) of every ValueResult produced
while validating a value tree, plus a single aggregate validity flag.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Iterator, Mapping

from .types import Path, ValueResult


class ValueResultError(Exception):
    """Error for a single failed value, with its path included."""

    def __init__(self, path: Path, value_result: ValueResult):
        super().__init__(path, value_result)
        self.path = path
        self.value_result = value_result

    def __str__(self) -> str:
        return f"@path '{self.path}': {self.value_result.message}"


class Results:
    """
    Results of executing a schema against a value.

    `valid` is True only while every recorded result is valid. Paths iterate
    in the order they were first recorded, which is the walk order; callers
    wanting a different order should sort by path.
    """

    __slots__ = ("_fields", "_valid")

    def __init__(self) -> None:
        self._fields: dict[Path, list[ValueResult]] = {}
        self._valid = True

    @property
    def valid(self) -> bool:
        return self._valid

    @property
    def fields(self) -> Mapping[Path, tuple[ValueResult, ...]]:
        """Read-only snapshot of the results recorded at each path."""
        return MappingProxyType(
            {path: tuple(path_results) for path, path_results in self._fields.items()}
        )

    def record(self, path: Path, result: ValueResult) -> None:
        """Append a result at path. Used by the walker."""
        self._fields.setdefault(path, []).append(result)

        if not result.valid:
            self._valid = False

    def merge(self, other: Results) -> None:
        """Record every result of another Results into this one."""
        for path, result in other:
            self.record(path, result)

    def each_result(self, visit: Callable[[Path, ValueResult], bool]) -> None:
        """
        Call visit once per ValueResult.

        The visitor returns True to keep iterating, or False to stop.
        """
        for path, result in self:
            if not visit(path, result):
                return

    def detailed_errors(self) -> Results:
        """Return a new Results containing only the failed results."""
        errors = Results()
        for path, result in self:
            if not result.valid:
                errors.record(path, result)
        return errors

    def errors(self) -> list[ValueResultError]:
        """Return one error per failed value validation."""
        return [
            ValueResultError(path, result) for path, result in self if not result.valid
        ]

    def __iter__(self) -> Iterator[tuple[Path, ValueResult]]:
        for path, path_results in self._fields.items():
            for result in path_results:
                yield path, result

    def __len__(self) -> int:
        return sum(len(path_results) for path_results in self._fields.values())

    def __repr__(self) -> str:
        return f"Results(valid={self._valid}, fields={self._fields!r})"
