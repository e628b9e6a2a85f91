#
# src/tallytest/telemetry/__init__.py
#
"""
Logging setup for tallytest.
"""

from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
