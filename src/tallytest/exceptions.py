#
# src/tallytest/exceptions.py
#
"""
Custom exceptions for tallytest.
"""

from pathlib import Path


class TallytestError(Exception):
    """Base class for all errors raised by tallytest itself."""

    pass


class ConfigurationError(TallytestError):
    """Raised when a configuration file is missing, unreadable or invalid."""

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = str(path) if path is not None else None
        full_message = message
        if self.path:
            full_message += f" (Config: '{self.path}')"
        super().__init__(full_message)


class TestFileError(TallytestError):
    """Base class for errors locating or loading a test file."""

    __test__ = False

    def __init__(self, message: str, path: str | Path):
        self.path = str(path)
        super().__init__(f"{message}: '{self.path}'")


class TestFileNotFoundError(TestFileError):
    """The test file does not exist or is not a regular file."""

    __test__ = False

    def __init__(self, path: str | Path):
        super().__init__("Test file not found", path)


# 🔼⚙️
