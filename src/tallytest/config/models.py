#
# config/models.py
#
"""
Attrs-based data models for tallytest configuration structure.
"""

import logging
from pathlib import Path
from typing import Any

from attrs import define, field, mutable

from tallytest.state import TestFileEntry


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_bool(inst: Any, attr: Any, value: Any) -> None:
    """Validator rejects truthy non-bools such as "no" read from a config file."""
    if not isinstance(value, bool):
        raise ValueError(f"Field '{attr.name}' must be true or false, got {value!r}")


def _optional_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(value)


@mutable(slots=True)
class DisplayOptions:
    """
    Display toggles and report destination for a Recorder.

    Mutable because the recorder setters flip them at any point of a run.
    """

    show_tests: bool = field(default=True, validator=_validate_bool)
    show_totals: bool = field(default=True, validator=_validate_bool)
    show_failing: bool = field(default=True, validator=_validate_bool)
    show_passing: bool = field(default=False, validator=_validate_bool)
    show_contents: bool = field(default=True, validator=_validate_bool)
    show_color: bool = field(default=True, validator=_validate_bool)
    log_file: Path | None = field(default=None, converter=_optional_path)
    overwrite_log: bool = field(default=False, validator=_validate_bool)

    @property
    def log_mode(self) -> str:
        return "w" if self.overwrite_log else "a"


@define(frozen=True, slots=True)
class GlobalConfig:
    """Global default settings for tallytest."""
    log_level: str = field(default="WARNING", validator=_validate_log_level)

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())


@define(frozen=True, slots=True)
class TallytestConfig:
    """Root configuration object for a tallytest run."""
    display: DisplayOptions = field(factory=DisplayOptions)
    env: dict[str, Any] = field(factory=dict)
    files: list[TestFileEntry] = field(factory=list)
    group_prefix: str | None = field(default=None)
    global_config: GlobalConfig = field(factory=GlobalConfig, metadata={"toml_name": "global"})
    config_file_path: Path | None = field(default=None)


# 🔼⚙️
