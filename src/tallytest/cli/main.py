# src/tallytest/cli/main.py

"""
Main CLI entry point for tallytest using Click.
"""

from importlib.metadata import PackageNotFoundError, version

import click

from tallytest.cli.config_cmds import config_cli
from tallytest.cli.run_cmds import run_cli
from tallytest.cli.utils import logging_options

try:
    __version__ = version("tallytest")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="tallytest")
@logging_options
@click.pass_context
def cli(
    ctx: click.Context,
    log_level: str | None,
    log_file: str | None,
    json_logs: bool | None,
):
    """
    Tallytest: run test files and report grouped pass/fail results.

    Logging options given here apply to every subcommand; the subcommand
    sets logging up once its own options are known.
    """
    ctx.ensure_object(dict)
    ctx.obj["LOG_LEVEL"] = log_level
    ctx.obj["LOG_FILE"] = log_file
    ctx.obj["JSON_LOGS"] = bool(json_logs)


cli.add_command(config_cli)
cli.add_command(run_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
