#
# config/loader.py
#
"""
Loads a tallytest TOML file into the attrs configuration models.
"""

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import attrs
import structlog

from tallytest.config.models import DisplayOptions, GlobalConfig, TallytestConfig
from tallytest.exceptions import ConfigurationError
from tallytest.state import TestFileEntry

log = structlog.get_logger("config.loader")

DEFAULT_CONFIG_NAME = "tallytest.toml"


def _table(data: Mapping[str, Any], key: str, path: Path) -> Mapping[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"[{key}] must be a table", path)
    return value


def _build(model: type, values: Mapping[str, Any], section: str, path: Path) -> Any:
    known = {a.name for a in attrs.fields(model)}
    unknown = set(values) - known
    if unknown:
        raise ConfigurationError(
            f"Unknown key(s) in [{section}]: {sorted(unknown)}", path
        )
    try:
        return model(**values)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid [{section}] section: {e}", path) from e


def _load_files(raw: Any, base_dir: Path, path: Path) -> list[TestFileEntry]:
    if not isinstance(raw, list):
        raise ConfigurationError("[[files]] must be an array of tables", path)

    entries: list[TestFileEntry] = []
    for index, item in enumerate(raw):
        if not isinstance(item, Mapping) or "path" not in item:
            raise ConfigurationError(f"files[{index}] needs a 'path' key", path)
        file_path = Path(item["path"])
        if not file_path.is_absolute():
            file_path = base_dir / file_path
        try:
            entries.append(TestFileEntry(file_path, item.get("mode", "run")))
        except ValueError as e:
            raise ConfigurationError(f"files[{index}]: {e}", path) from e
    return entries


def load_config(config_path: Path) -> TallytestConfig:
    """
    Reads and validates a TOML configuration file.

    Relative test file paths are resolved against the directory holding the
    configuration file.

    Raises:
        ConfigurationError: If the file is missing, is not valid TOML, or
            contains values the models reject.
    """
    config_path = Path(config_path)
    config_log = log.bind(config_path=str(config_path))
    config_log.debug("Loading configuration")

    try:
        with config_path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as e:
        raise ConfigurationError("Configuration file does not exist", config_path) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Error parsing TOML: {e}", config_path) from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file: {e}", config_path) from e

    display = _build(DisplayOptions, _table(data, "display", config_path), "display", config_path)
    global_config = _build(GlobalConfig, _table(data, "global", config_path), "global", config_path)

    run_section = _table(data, "run", config_path)
    group_prefix = run_section.get("group_prefix")
    if group_prefix is not None and not isinstance(group_prefix, str):
        raise ConfigurationError("[run] group_prefix must be a string", config_path)

    env = dict(_table(data, "env", config_path))
    files = _load_files(data.get("files", []), config_path.parent, config_path)

    if display.log_file is not None and not display.log_file.is_absolute():
        display.log_file = config_path.parent / display.log_file

    config = TallytestConfig(
        display=display,
        env=env,
        files=files,
        group_prefix=group_prefix,
        global_config=global_config,
        config_file_path=config_path,
    )
    config_log.info(
        "Configuration loaded",
        file_count=len(files),
        env_keys=sorted(env),
        group_prefix=group_prefix,
    )
    return config


# 🔼⚙️
