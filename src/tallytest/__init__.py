#
# src/tallytest/__init__.py
#
"""
tallytest: a small harness that runs test files against a shared
environment and reports grouped pass/fail results.
"""
from .config import DisplayOptions
from .exceptions import ConfigurationError, TallytestError, TestFileError, TestFileNotFoundError
from .runtime import Recorder
from .state import RunMode, TestFileEntry

__all__ = [
    "ConfigurationError",
    "DisplayOptions",
    "Recorder",
    "RunMode",
    "TallytestError",
    "TestFileEntry",
    "TestFileError",
    "TestFileNotFoundError",
]

# 🔼⚙️
