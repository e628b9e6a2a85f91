#
# tests/unit/test_recorder.py
#
"""
Tests for Recorder test bookkeeping: sequence numbers, comparisons,
exception-expectation tests, groups and printed lines.
"""

import functools
import io

import pytest

from tallytest.config import DisplayOptions
from tallytest.runtime import Recorder, invoke_thunk, is_thunk, strict_equal
from tallytest.state import FailureRecord


def raise_type_error():
    raise TypeError("bad type")


def return_quietly():
    return 42


class TestSequenceNumbers:
    """Every test call takes exactly one sequence number."""

    def test_counter_increments_for_pass_and_fail(self, recorder: Recorder) -> None:
        recorder.test("pass", 1, 1)
        recorder.test("fail", 1, 2)
        recorder.test("pass again", "a", "a")

        assert recorder.test_count == 3
        group = recorder.groups[""]
        assert list(group.passes) == [1, 3]
        assert list(group.failures) == [2]

    def test_numbers_are_unique_across_groups(self, recorder: Recorder) -> None:
        recorder.set_group("one")
        recorder.test("a", 1, 1)
        recorder.test("b", 1, 0)
        recorder.set_group("two")
        recorder.test("c", 1, 1)
        recorder.test("d", 2, 3)

        numbers = []
        for group in recorder.groups.values():
            numbers += list(group.passes) + list(group.failures)
        assert sorted(numbers) == [1, 2, 3, 4]

    def test_returns_whether_test_passed(self, recorder: Recorder) -> None:
        assert recorder.test("same", 5, 5) is True
        assert recorder.test("different", 5, 6) is False


class TestStrictEquality:
    """Plain tests compare value and type."""

    @pytest.mark.parametrize(
        ("actual", "expected"),
        [
            (1, 1),
            ("abc", "abc"),
            (None, None),
            ([1, 2], [1, 2]),
            ({"a": [1]}, {"a": [1]}),
            ((1, "x"), (1, "x")),
        ],
    )
    def test_equal_values_of_same_type(self, actual, expected) -> None:
        assert strict_equal(actual, expected)

    @pytest.mark.parametrize(
        ("actual", "expected"),
        [
            (1, 1.0),
            (True, 1),
            ("1", 1),
            ([1, 2], (1, 2)),
            ([1, 2], [1, 2.0]),
            ({"a": 1}, {"a": True}),
            (0, None),
        ],
    )
    def test_loose_matches_are_rejected(self, actual, expected) -> None:
        assert not strict_equal(actual, expected)

    def test_expected_defaults_to_true(self, recorder: Recorder) -> None:
        assert recorder.test("literal true", True)
        assert not recorder.test("truthy int", 1)

    def test_failure_keeps_original_values(self, recorder: Recorder) -> None:
        recorder.test("string vs int", "1", 1)

        record = recorder.groups[""].failures[1]
        assert record == FailureRecord(note="string vs int", actual="1", expected=1)


class TestExceptionExpectations:
    """Deferred computations pass only when they raise exactly the expected kind."""

    def test_matching_kind_passes(self, recorder: Recorder) -> None:
        assert recorder.test("throws", raise_type_error, TypeError)
        assert recorder.groups[""].passes == {1: "throws"}

    def test_different_kind_fails_and_is_swallowed(self, recorder: Recorder) -> None:
        assert not recorder.test("wrong kind", raise_type_error, ValueError)

        record = recorder.groups[""].failures[1]
        assert record.actual is TypeError
        assert record.expected is ValueError

    def test_no_exception_fails(self, recorder: Recorder) -> None:
        assert not recorder.test("quiet", return_quietly, TypeError)
        assert recorder.groups[""].failures[1].actual is None

    def test_no_exception_fails_even_when_expecting_none(self, recorder: Recorder) -> None:
        assert not recorder.test("quiet", return_quietly, None)

    def test_subclass_does_not_match_parent(self, recorder: Recorder) -> None:
        def lookup():
            return {}["missing"]

        assert not recorder.test("key error is not lookup error", lookup, LookupError)
        assert recorder.test("key error", lookup, KeyError)

    def test_lambda_and_partial_are_thunks(self, recorder: Recorder) -> None:
        assert recorder.test("lambda", lambda: int("x"), ValueError)
        assert recorder.test("partial", functools.partial(int, "x"), ValueError)

    def test_classes_are_compared_not_called(self, recorder: Recorder) -> None:
        assert not is_thunk(int)
        assert recorder.test("class identity", int, int)

    def test_invoke_thunk_tags_outcome(self) -> None:
        raised = invoke_thunk(raise_type_error)
        returned = invoke_thunk(return_quietly)

        assert raised.raised and raised.error_kind is TypeError
        assert not returned.raised and returned.value == 42


class TestGroups:
    """Group naming, prefixes and lazy creation."""

    def test_groups_are_created_once(self, recorder: Recorder) -> None:
        recorder.set_group("alpha")
        recorder.test("a", 1, 1)
        recorder.set_group("beta")
        recorder.set_group("alpha")
        recorder.test("b", 1, 2)

        assert list(recorder.groups) == ["alpha", "beta"]
        assert recorder.groups["alpha"].passes == {1: "a"}
        assert list(recorder.groups["alpha"].failures) == [2]
        assert recorder.groups["beta"].total == 0

    def test_prefix_is_applied_to_later_groups(self, recorder: Recorder) -> None:
        recorder.set_group("plain")
        recorder.set_group_prefix("postgres")
        recorder.set_group("users")

        assert recorder.current_group == "postgres: users"
        assert list(recorder.groups) == ["plain", "postgres: users"]

    def test_empty_prefix_clears_it(self, recorder: Recorder) -> None:
        recorder.set_group_prefix("sqlite")
        recorder.set_group_prefix("")
        recorder.set_group("users")

        assert recorder.group_prefix is None
        assert recorder.current_group == "users"

    def test_tests_without_group_use_empty_name(self, recorder: Recorder) -> None:
        recorder.test("orphan", 1, 1)
        assert recorder.groups[""].passes == {1: "orphan"}


class TestPrintedLines:
    """PASS/FAIL lines and group markers written while tests run."""

    def test_plain_lines(self, recorder: Recorder, capsys: pytest.CaptureFixture[str]) -> None:
        recorder.set_group("math")
        recorder.test("adds", 2, 2)
        recorder.test("subtracts", 1, 0)

        assert capsys.readouterr().out == "* math\n001: PASS - adds\n002: FAIL - subtracts\n"

    def test_colored_tags(self, clock, capsys: pytest.CaptureFixture[str]) -> None:
        recorder = Recorder(clock=clock)
        recorder.test("good", 1, 1)
        recorder.test("bad", 1, 2)

        out = capsys.readouterr().out
        assert "001: \x1b[32mPASS\x1b[0m - good\n" in out
        assert "002: \x1b[31mFAIL\x1b[0m - bad\n" in out

    def test_hidden_tests_print_nothing(self, recorder: Recorder, capsys: pytest.CaptureFixture[str]) -> None:
        recorder.set_show_tests(False)
        recorder.set_group("quiet")
        recorder.test("silent", 1, 1)

        assert capsys.readouterr().out == ""
        assert recorder.test_count == 1

    def test_explicit_stream(self, clock, capsys: pytest.CaptureFixture[str]) -> None:
        stream = io.StringIO()
        recorder = Recorder(options=DisplayOptions(show_color=False), clock=clock, stream=stream)
        recorder.test("to stream", 1, 1)

        assert stream.getvalue() == "001: PASS - to stream\n"
        assert capsys.readouterr().out == ""


class TestConfiguration:
    """Setters, environment handling and the shared instance."""

    def test_defaults(self) -> None:
        options = Recorder().options

        assert options.show_tests and options.show_totals and options.show_failing
        assert options.show_contents and options.show_color
        assert not options.show_passing
        assert options.log_file is None

    def test_setters_update_options(self, recorder: Recorder) -> None:
        recorder.set_show_passing()
        recorder.set_show_totals(False)
        recorder.set_show_contents(0)
        recorder.set_log_file("results.log", overwrite=True)

        assert recorder.options.show_passing is True
        assert recorder.options.show_totals is False
        assert recorder.options.show_contents is False
        assert str(recorder.options.log_file) == "results.log"
        assert recorder.options.log_mode == "w"

    def test_set_env_replaces_and_add_env_merges(self, recorder: Recorder) -> None:
        recorder.set_env({"a": 1, "b": 2})
        recorder.add_env({"b": 3, "c": 4})
        assert dict(recorder.environment) == {"a": 1, "b": 3, "c": 4}

        recorder.set_env({"z": 0})
        assert dict(recorder.environment) == {"z": 0}

    def test_singleton_returns_same_instance(self) -> None:
        assert Recorder.singleton() is Recorder.singleton()
        assert Recorder.singleton() is not Recorder()

    def test_end_time_tracks_latest_test(self, recorder: Recorder, clock) -> None:
        recorder.test("first", 1, 1)
        first = recorder.end_time
        recorder.test("second", 1, 1)

        assert recorder.end_time == first + clock.step
