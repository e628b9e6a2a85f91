#
# config/__init__.py
#
"""
Configuration handling sub-package for tallytest.

Exports the loading function and core configuration models.
"""

from .loader import DEFAULT_CONFIG_NAME, load_config
from .models import DisplayOptions, GlobalConfig, TallytestConfig

__all__ = [
    "DEFAULT_CONFIG_NAME",
    "DisplayOptions",
    "GlobalConfig",
    "TallytestConfig",
    "load_config",
]

# 🔼⚙️
