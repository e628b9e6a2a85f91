# src/tallytest/cli/utils.py

import logging
from typing import Any

import click

from tallytest.telemetry.logger import setup_logging

LOG_LEVEL_CHOICES = click.Choice(["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"], case_sensitive=False)


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default=None,
        envvar="TALLYTEST_LOG_LEVEL",
        help="Set the logging level (overrides config file).",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="TALLYTEST_LOG_FILE",
        help="Path to write diagnostic logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=None,
        envvar="TALLYTEST_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def requested_log_level(ctx: click.Context, local_log_level: str | None = None) -> str | None:
    """Log level from the subcommand or the group, if either was given."""
    obj: dict[str, Any] = ctx.obj or {}
    return local_log_level or obj.get("LOG_LEVEL")


def setup_logging_from_context(ctx: click.Context, options: dict[str, Any], default_log_level: str = "WARNING") -> None:
    """
    Sets logging up once per command, subcommand options winning over the group's.

    `options` are the subcommand's own `logging_options` values.
    """
    obj: dict[str, Any] = ctx.obj or {}
    level_name = requested_log_level(ctx, options.get("log_level")) or default_log_level
    json_logs = options.get("json_logs")
    setup_logging(
        level=logging.getLevelName(level_name.upper()),
        json_logs=json_logs if json_logs is not None else obj.get("JSON_LOGS", False),
        log_file=options.get("log_file") or obj.get("LOG_FILE"),
    )


def parse_env_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    """Turns repeated KEY=VALUE options into a mapping."""
    env: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint="--env")
        if not key.isidentifier():
            raise click.BadParameter(f"'{key}' is not a valid variable name", param_hint="--env")
        env[key] = value
    return env

# ⚙️🛠️
