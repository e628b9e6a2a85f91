#
# src/tallytest/runtime/report.py
#
"""
Renders recorded outcomes into the plain-text results report.
"""

from collections.abc import Mapping
from typing import Any

from tallytest.config.models import DisplayOptions
from tallytest.state import FailureRecord, GroupResults

HEADER = "\n--------------------------\nTesting Results\n--------------------------\n\n"
FAILING_HEADER = "Failing tests\n-------------\n"
PASSING_HEADER = "Passing tests\n-------------\n"
VALUE_WIDTH = 20


def format_sequence(number: int) -> str:
    return str(number).zfill(3)


def format_value(value: Any) -> str:
    """repr() of the value, cut to VALUE_WIDTH characters plus '...'."""
    text = repr(value)
    if len(text) > VALUE_WIDTH:
        text = text[:VALUE_WIDTH] + "..."
    return text


def _failure_line(number: int, record: FailureRecord) -> str:
    return (
        f"  {format_sequence(number)}: {record.note}; "
        f"should be: {format_value(record.expected)} is: {format_value(record.actual)}\n"
    )


def list_failures(groups: Mapping[str, GroupResults]) -> tuple[str, int]:
    body = ""
    total = 0
    for name, group in groups.items():
        if not group.failures:
            continue
        body += f"* {name}\n"
        for number, record in group.failures.items():
            body += _failure_line(number, record)
            total += 1
    return body, total


def list_passes(groups: Mapping[str, GroupResults]) -> tuple[str, int]:
    body = ""
    total = 0
    for name, group in groups.items():
        if not group.passes:
            continue
        body += f"* {name}\n"
        for note in group.passes.values():
            body += f"  {note}\n"
            total += 1
    return body, total


def percent_passed(passes: int, total: int) -> int:
    """Rounded half up; a zero total counts as one."""
    return int(passes * 100 / max(total, 1) + 0.5)


def render_report(
    groups: Mapping[str, GroupResults],
    test_count: int,
    contents: str,
    options: DisplayOptions,
    elapsed: float,
) -> str:
    """Assembles the report sections enabled in `options`."""
    report = HEADER
    if options.show_contents:
        report += f"Printed Data{contents}\n\n"

    if options.show_failing:
        fail_body, fails = list_failures(groups)
        if fails > 0:
            report += f"{FAILING_HEADER}{fail_body}\n"

    pass_body, passes = list_passes(groups)
    if options.show_passing and passes > 0:
        report += f"{PASSING_HEADER}.{pass_body}.\n"

    if options.show_totals:
        percent = percent_passed(passes, test_count)
        report += f"{passes}/{test_count} ({percent}%) passed in {elapsed:.2f} seconds\n"
    return report


# 🔼⚙️
