import logging
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from tallytest.config import DisplayOptions
from tallytest.runtime import Recorder
from tallytest.telemetry import setup_logging

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class FakeClock:
    """Deterministic clock: every call advances by `step` seconds."""

    def __init__(self, start: float = 100.0, step: float = 0.25):
        self.now = start
        self.step = step
        self.calls = 0

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        self.calls += 1
        return value


@pytest.fixture(autouse=True)
def quiet_logging():
    # Handlers from a previous CliRunner invocation point at closed streams.
    setup_logging(level=logging.WARNING, file_only=True)
    yield


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recorder(clock: FakeClock) -> Recorder:
    """A recorder with color disabled so printed lines are plain text."""
    return Recorder(options=DisplayOptions(show_color=False), clock=clock)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def write_suite(tmp_path: Path) -> Callable[[str, str], Path]:
    """Writes a test file into tmp_path and returns its path."""

    def _write(name: str, body: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(body))
        return path

    return _write
