# src/tallytest/cli/config_cmds.py

from pathlib import Path

import click
import structlog
from rich.pretty import pretty_repr

from tallytest.cli.utils import logging_options, setup_logging_from_context
from tallytest.config import DEFAULT_CONFIG_NAME, load_config
from tallytest.exceptions import ConfigurationError
from tallytest.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.config")


@click.group(name="config")
def config_cli():
    """Commands for inspecting and validating configuration."""
    pass


@config_cli.command(name="show")
@click.option(
    "-c",
    "--config-path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
    default=Path(DEFAULT_CONFIG_NAME),
    show_default=True,
    envvar="TALLYTEST_CONF",
    help="Path to the tallytest configuration file (env var TALLYTEST_CONF).",
    show_envvar=True,
)
@logging_options
@click.pass_context
def show_config(ctx: click.Context, config_path: Path, **kwargs):
    """Load, validate, and display the configuration."""
    setup_logging_from_context(ctx, kwargs)
    log.info("Executing 'config show' command", config_path=str(config_path))

    try:
        config = load_config(config_path)
        log.debug("Configuration loaded successfully by 'show' command.")

        # Echo the rich-formatted string so CliRunner can see it.
        click.echo(pretty_repr(config, expand_all=True))

        missing = [str(entry.path) for entry in config.files if not entry.path.is_file()]
        if missing:
            log.warning(
                f"{len(missing)} test file(s) listed in the configuration do not exist.",
                missing=missing,
            )

    except ConfigurationError as e:
        log.error("Failed to load or validate configuration", error=str(e), exc_info=True)
        click.echo(f"Error: Configuration problem in '{config_path}':\n{e}", err=True)
        ctx.exit(1)

# 🔼⚙️
