#
# src/tallytest/state.py
#
"""
Defines the data recorded during a test run: run modes, outcomes, groups and
the list registry.
"""

from collections.abc import Sequence
from enum import IntEnum
from pathlib import Path
from typing import Any

import structlog
from attrs import define, field, mutable

log: structlog.stdlib.BoundLogger = structlog.get_logger("state")

DEFAULT_GROUP = ""


class RunMode(IntEnum):
    """Per-file run control for a batch."""

    SKIP = 0
    RUN = 1
    ONLY = 2  # Suppresses every non-ONLY file in the batch.

    @classmethod
    def parse(cls, value: "str | int | RunMode") -> "RunMode":
        """Accepts a member, its integer value or its case-insensitive name."""
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ValueError(
                    f"Invalid run mode '{value}'. Must be one of {[m.name.lower() for m in cls]}."
                ) from None
        return cls(value)


@define(frozen=True, slots=True)
class TestFileEntry:
    """One (path, mode) pair of a batch descriptor."""

    __test__ = False

    path: Path = field(converter=Path)
    mode: RunMode = field(default=RunMode.RUN, converter=RunMode.parse)


@define(frozen=True, slots=True)
class ThunkOutcome:
    """
    Result of invoking a deferred computation under test.

    `error_kind` is the class of the exception it raised, or None when it
    returned normally.
    """

    error_kind: type[BaseException] | None = None
    value: Any = None

    @property
    def raised(self) -> bool:
        return self.error_kind is not None


@define(frozen=True, slots=True)
class FailureRecord:
    """A failing outcome. Values are kept as-is and only rendered in the report."""

    note: str
    actual: Any
    expected: Any


@mutable(slots=True)
class GroupResults:
    """Passing and failing outcomes of one group, keyed by sequence number."""

    name: str = field()
    passes: dict[int, str] = field(factory=dict)
    failures: dict[int, FailureRecord] = field(factory=dict)

    @property
    def total(self) -> int:
        return len(self.passes) + len(self.failures)


@mutable(slots=True)
class ListRegistry:
    """Named expected sequences with a cursor each, advanced by the recorder."""

    _lists: dict[str, Sequence[Any]] = field(factory=dict)
    _cursors: dict[str, int] = field(factory=dict)

    def set(self, name: str, expected: Sequence[Any]) -> None:
        self._lists[name] = expected
        self.reset(name)

    def reset(self, name: str) -> None:
        self._cursors[name] = 0

    def cursor(self, name: str) -> int:
        return self._cursors[name]

    def expected(self, name: str) -> Any:
        """Current expected value. Overrunning the sequence raises IndexError."""
        return self._lists[name][self._cursors[name]]

    def advance(self, name: str) -> None:
        self._cursors[name] += 1
        log.debug("List cursor advanced", list_name=name, cursor=self._cursors[name])


# 🔼⚙️
