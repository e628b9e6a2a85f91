#
# src/tallytest/runtime/capture.py
#
"""
Scoped interception of incidental stdout produced while tests execute.
"""

import contextlib
import io
from collections.abc import Iterator

import structlog

from tallytest.telemetry import StructLogger

log: StructLogger = structlog.get_logger("runtime.capture")

SEPARATOR = "\n------------\n\n"


class CaptureBuffer:
    """
    Accumulates stdout written inside capture windows.

    The buffer is only live between `open()` and `close()`. Inside that
    span, windows are opened and closed around every harness operation;
    closing a window appends whatever was printed in it to `contents`.
    Outside the span all window operations are no-ops.

    Harness log calls must happen while no window is open, otherwise a
    logger printing to stdout ends up in `contents`.
    """

    def __init__(self) -> None:
        self._active = False
        self._window: contextlib.ExitStack | None = None
        self._sink: io.StringIO | None = None
        self._chunks: list[str] = []

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def is_window_open(self) -> bool:
        return self._window is not None

    @property
    def contents(self) -> str:
        """Everything captured so far, each chunk preceded by a separator."""
        return "".join(self._chunks)

    def open(self) -> None:
        log.debug("Output capture opened")
        self._active = True
        self.open_window()

    def close(self) -> None:
        self.close_window()
        self._active = False
        log.debug("Output capture closed", chunks=len(self._chunks))

    def open_window(self) -> None:
        if not self._active or self._window is not None:
            return
        sink = io.StringIO()
        window = contextlib.ExitStack()
        window.enter_context(contextlib.redirect_stdout(sink))
        self._sink, self._window = sink, window

    def close_window(self) -> None:
        if self._window is None:
            return
        window, sink = self._window, self._sink
        self._window, self._sink = None, None
        window.close()
        text = sink.getvalue()
        if text:
            self._chunks.append(f"{SEPARATOR}{text}\n")

    @contextlib.contextmanager
    def window(self) -> Iterator[None]:
        """Captures the body into its own chunk while the buffer is active."""
        self.open_window()
        try:
            yield
        finally:
            self.close_window()

    @contextlib.contextmanager
    def paused(self) -> Iterator[None]:
        """Flushes the current window, runs the body on the real stdout, reopens."""
        self.close_window()
        try:
            yield
        finally:
            self.open_window()


# 🔼⚙️
