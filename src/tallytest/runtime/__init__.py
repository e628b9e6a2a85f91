#
# src/tallytest/runtime/__init__.py
#
"""
Test execution and reporting sub-package for tallytest.
"""
from .capture import CaptureBuffer
from .loader import execute_test_file
from .recorder import Recorder, invoke_thunk, is_thunk, strict_equal
from .report import render_report

__all__ = [
    "CaptureBuffer",
    "Recorder",
    "execute_test_file",
    "invoke_thunk",
    "is_thunk",
    "render_report",
    "strict_equal",
]

# 🔼⚙️
