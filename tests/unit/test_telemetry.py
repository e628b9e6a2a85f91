"""Tests for structlog processors and logging setup."""

import contextlib
import io
import logging

import structlog

from tallytest.telemetry import setup_logging
from tallytest.telemetry.logger.processors import (
    add_emoji_processor,
    remove_extra_keys_processor,
)


def test_emoji_follows_level():
    event = add_emoji_processor(None, "info", {"event": "hello", "level": "info"})
    assert event["event"] == "ℹ️ hello"


def test_emoji_key_overrides_level():
    event = add_emoji_processor(None, "info", {"event": "run", "level": "info", "emoji_key": "run"})
    assert event["event"] == "🧪 run"


def test_internal_keys_removed():
    event = remove_extra_keys_processor(None, "info", {"event": "x", "emoji_key": "run", "path": "a.py"})
    assert event == {"event": "x", "path": "a.py"}


def test_setup_logging_sets_root_level(tmp_path):
    log_file = tmp_path / "tallytest.jsonl"
    setup_logging(level=logging.DEBUG, log_file=str(log_file), file_only=True)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert [type(h) for h in root.handlers] == [logging.FileHandler]
    assert log_file.exists()


def test_console_handler_bound_at_setup_time():
    console = io.StringIO()
    setup_logging(level=logging.INFO, stream=console)

    with contextlib.redirect_stdout(io.StringIO()) as redirected:
        structlog.get_logger("tallytest.check").info("still on the console")

    assert "still on the console" in console.getvalue()
    assert redirected.getvalue() == ""


def test_setup_replaces_previous_handlers():
    setup_logging(level=logging.INFO, stream=io.StringIO())
    setup_logging(level=logging.INFO, stream=io.StringIO())

    assert len(logging.getLogger().handlers) == 1
