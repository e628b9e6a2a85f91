#
# src/tallytest/runtime/recorder.py
#
"""
The Recorder: runs test files, records grouped pass/fail outcomes and
renders the results report.
"""

import contextlib
import functools
import sys
import time
import types
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, ClassVar, TextIO, TypeAlias

import structlog

from tallytest.config.models import DisplayOptions
from tallytest.exceptions import TestFileNotFoundError
from tallytest.runtime.capture import CaptureBuffer
from tallytest.runtime.loader import execute_test_file
from tallytest.runtime.report import format_sequence, render_report
from tallytest.state import (
    DEFAULT_GROUP,
    FailureRecord,
    GroupResults,
    ListRegistry,
    RunMode,
    TestFileEntry,
    ThunkOutcome,
)
from tallytest.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.recorder")

BatchItem: TypeAlias = TestFileEntry | tuple[str | Path, RunMode | int | str]

GREEN = "\x1b[32m"
RED = "\x1b[31m"
RESET = "\x1b[0m"

# Zero-argument callables of these types are exception-expectation tests.
THUNK_TYPES = (types.FunctionType, types.MethodType, functools.partial)


def is_thunk(value: Any) -> bool:
    return isinstance(value, THUNK_TYPES)


def invoke_thunk(thunk: Callable[[], Any]) -> ThunkOutcome:
    """Calls the thunk and tags the result with the kind of exception raised."""
    try:
        value = thunk()
    except Exception as e:
        return ThunkOutcome(error_kind=type(e))
    return ThunkOutcome(value=value)


def strict_equal(actual: Any, expected: Any) -> bool:
    """Equal value and identical type, applied element-wise to containers."""
    if type(actual) is not type(expected):
        return False
    if isinstance(actual, (list, tuple)):
        return len(actual) == len(expected) and all(
            strict_equal(a, e) for a, e in zip(actual, expected)
        )
    if isinstance(actual, dict):
        return actual.keys() == expected.keys() and all(
            strict_equal(value, expected[key]) for key, value in actual.items()
        )
    return bool(actual == expected)


def _as_entry(item: BatchItem) -> TestFileEntry:
    if isinstance(item, TestFileEntry):
        return item
    path, mode = item
    return TestFileEntry(path, mode)


class Recorder:
    """
    Owns all state of a test run.

    Test files call back into the recorder (bound as `tester`) through
    `set_group`, `test` and `test_list`. Anything they print outside those
    calls is captured and shown in the report's printed data section.

    Example:
        recorder = Recorder()
        recorder.set_env({"dsn": "sqlite://"})
        recorder.run_tests([("tests/one.py", RunMode.RUN), ("tests/two.py", RunMode.SKIP)])
        print(recorder.get_results())
    """

    _instance: ClassVar["Recorder | None"] = None

    def __init__(
        self,
        options: DisplayOptions | None = None,
        clock: Callable[[], float] = time.time,
        stream: TextIO | None = None,
    ):
        self.options = options if options is not None else DisplayOptions()
        self._clock = clock
        self._stream = stream
        self._test_count = 0
        self._groups: dict[str, GroupResults] = {}
        self._group = DEFAULT_GROUP
        self._group_prefix: str | None = None
        self._environment: dict[str, Any] = {}
        self._lists = ListRegistry()
        self._buffer = CaptureBuffer()
        self._start_time: float | None = None
        self._end_time: float | None = None

    @classmethod
    def singleton(cls) -> "Recorder":
        """Returns the process-wide recorder, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    # --- Display configuration ---

    def set_show_tests(self, show: bool = True) -> None:
        self.options.show_tests = bool(show)

    def set_show_totals(self, show: bool = True) -> None:
        self.options.show_totals = bool(show)

    def set_show_failing(self, show: bool = True) -> None:
        self.options.show_failing = bool(show)

    def set_show_passing(self, show: bool = True) -> None:
        self.options.show_passing = bool(show)

    def set_show_contents(self, show: bool = True) -> None:
        self.options.show_contents = bool(show)

    def set_show_color(self, show: bool = True) -> None:
        self.options.show_color = bool(show)

    def set_log_file(self, path: str | Path | None, overwrite: bool = False) -> None:
        """The report is written there by `get_results`, not now."""
        self.options.log_file = path
        self.options.overwrite_log = bool(overwrite)

    # --- Environment and groups ---

    def set_env(self, variables: Mapping[str, Any]) -> None:
        self._environment = dict(variables)

    def add_env(self, variables: Mapping[str, Any]) -> None:
        self._environment = {**self._environment, **variables}

    def set_group_prefix(self, prefix: str | None) -> None:
        """Prefix for every group named afterwards, e.g. the environment under test."""
        self._group_prefix = prefix or None

    def set_group(self, label: str) -> None:
        with self._buffer.paused():
            if self._group_prefix:
                self._group = f"{self._group_prefix}: {label}"
            else:
                self._group = label
            self._ensure_group(self._group)
            if self.options.show_tests:
                self._emit(f"* {self._group}\n")

    # --- Tests ---

    def test(self, note: str, actual: Any, expected: Any = True) -> bool:
        """
        Records one test and returns whether it passed.

        A plain function, lambda, bound method or functools.partial passed
        as `actual` is called with no arguments; the test passes only if it
        raises an exception whose class is exactly `expected`. Anything
        else is compared with `strict_equal`.
        """
        with self._buffer.paused():
            self._test_count += 1
            number = self._test_count

            if is_thunk(actual):
                with self._buffer.window():
                    outcome = invoke_thunk(actual)
                passed = outcome.raised and outcome.error_kind is expected
                actual = outcome.error_kind
            else:
                passed = strict_equal(actual, expected)

            group = self._ensure_group(self._group)
            if passed:
                group.passes[number] = note
            else:
                group.failures[number] = FailureRecord(note=note, actual=actual, expected=expected)
            if self.options.show_tests:
                tag = self._colorize("PASS", GREEN) if passed else self._colorize("FAIL", RED)
                self._emit(f"{format_sequence(number)}: {tag} - {note}\n")

            self._end_time = self._clock()
        return passed

    def set_list(self, name: str, expected: Sequence[Any]) -> None:
        self._lists.set(name, expected)

    def reset_list_counter(self, name: str) -> None:
        self._lists.reset(name)

    def test_list(self, name: str, value: Any) -> bool:
        """
        Compares `value` with the next expected item of list `name`.

        There is no bounds check: running past the end of the list raises
        IndexError, and an unknown name raises KeyError.
        """
        cursor = self._lists.cursor(name)
        expected = self._lists.expected(name)
        print(f"Is:\n{value}\nShould be:\n{expected}", end="")
        passed = self.test(f"List {name}: {cursor}", value, expected)
        with self._buffer.paused():
            self._lists.advance(name)
        return passed

    # --- Batch runs ---

    @contextlib.contextmanager
    def capturing(self) -> Iterator["Recorder"]:
        """Captures incidental output for the duration of the block."""
        self._buffer.open()
        try:
            yield self
        finally:
            self._buffer.close()

    def run_tests(self, files: Iterable[BatchItem]) -> list[Path]:
        """
        Runs a batch of test files and returns the paths that were executed.

        If any entry is ONLY, just the ONLY entries run. Otherwise every
        entry that is not SKIP runs, in order. Errors raised by a test file
        propagate after capture has been released.
        """
        entries = [_as_entry(item) for item in files]
        only = [entry for entry in entries if entry.mode is RunMode.ONLY]
        selected = only or [entry for entry in entries if entry.mode is not RunMode.SKIP]
        run_log = log.bind(batch_size=len(entries), selected=len(selected), only=bool(only))

        run_log.info("Starting test run", emoji_key="run")
        executed: list[Path] = []
        with self.capturing():
            self._start_time = self._clock()
            if self.options.show_tests:
                # Lands in the printed data as its first chunk.
                print("\nStarting tests...\n", end="")
            for entry in selected:
                self.run_test_file(entry.path)
                executed.append(entry.path)

        run_log.info(
            "Test run finished",
            executed=len(executed),
            tests=self._test_count,
            failures=self.failure_count,
        )
        return executed

    def run_test_file(self, path: str | Path) -> None:
        path = Path(path)
        with self._buffer.paused():
            log.debug("Executing test file", path=str(path), env_keys=sorted(self._environment), emoji_key="file")
        try:
            execute_test_file(path, self, self._environment)
        except TestFileNotFoundError:
            with self._buffer.paused():
                log.error("Test file not found", path=str(path))
            raise

    # --- Reporting ---

    def get_results(self) -> str:
        """Renders the report, writing it to the log file when one is set."""
        with self._buffer.paused():
            report = render_report(
                groups=self._groups,
                test_count=self._test_count,
                contents=self._buffer.contents,
                options=self.options,
                elapsed=self.elapsed,
            )
            if self.options.log_file is not None:
                self._write_log(report)
        return report

    # --- Read-only state ---

    @property
    def test_count(self) -> int:
        return self._test_count

    @property
    def groups(self) -> Mapping[str, GroupResults]:
        return types.MappingProxyType(self._groups)

    @property
    def current_group(self) -> str:
        return self._group

    @property
    def group_prefix(self) -> str | None:
        return self._group_prefix

    @property
    def environment(self) -> Mapping[str, Any]:
        return types.MappingProxyType(self._environment)

    @property
    def contents(self) -> str:
        return self._buffer.contents

    @property
    def pass_count(self) -> int:
        return sum(len(group.passes) for group in self._groups.values())

    @property
    def failure_count(self) -> int:
        return sum(len(group.failures) for group in self._groups.values())

    @property
    def start_time(self) -> float | None:
        return self._start_time

    @property
    def end_time(self) -> float | None:
        return self._end_time

    @property
    def elapsed(self) -> float:
        """Seconds from the run start to the most recent test."""
        if self._start_time is None or self._end_time is None:
            return 0.0
        return self._end_time - self._start_time

    # --- Internals ---

    def _ensure_group(self, name: str) -> GroupResults:
        group = self._groups.get(name)
        if group is None:
            group = GroupResults(name=name)
            self._groups[name] = group
            log.debug("Group created", group=name)
        return group

    def _colorize(self, text: str, color: str) -> str:
        if self.options.show_color:
            return f"{color}{text}{RESET}"
        return text

    def _emit(self, text: str) -> None:
        print(text, end="", file=self._stream or sys.stdout)

    def _write_log(self, report: str) -> None:
        path = self.options.log_file
        with open(path, self.options.log_mode, encoding="utf-8") as fh:
            fh.write(report)
        log.debug("Report written to log file", path=str(path), mode=self.options.log_mode, emoji_key="report")


# 🔼⚙️
