# src/tallytest/cli/run_cmds.py

import logging
from pathlib import Path

import attrs
import click
import structlog

from tallytest.cli.utils import (
    logging_options,
    parse_env_pairs,
    requested_log_level,
    setup_logging_from_context,
)
from tallytest.config import DEFAULT_CONFIG_NAME, TallytestConfig, load_config
from tallytest.exceptions import TallytestError
from tallytest.runtime import Recorder
from tallytest.state import RunMode, TestFileEntry
from tallytest.telemetry import StructLogger

log: StructLogger = structlog.get_logger("cli.run")

# CLI flag name -> DisplayOptions field
DISPLAY_FLAGS = {
    "show_tests": "show_tests",
    "show_totals": "show_totals",
    "show_failing": "show_failing",
    "show_passing": "show_passing",
    "show_contents": "show_contents",
    "color": "show_color",
}

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_ERROR = 2


def _load_run_config(config_path: Path | None) -> TallytestConfig:
    if config_path is not None:
        return load_config(config_path)
    default_path = Path(DEFAULT_CONFIG_NAME)
    if default_path.is_file():
        log.debug("Using configuration file from working directory", config_path=str(default_path))
        return load_config(default_path)
    return TallytestConfig()


def _build_entries(
    config: TallytestConfig,
    files: tuple[Path, ...],
    only_files: tuple[Path, ...],
    skip_files: tuple[Path, ...],
) -> list[TestFileEntry]:
    entries = list(config.files)
    entries += [TestFileEntry(path, RunMode.RUN) for path in files]
    entries += [TestFileEntry(path, RunMode.ONLY) for path in only_files]
    entries += [TestFileEntry(path, RunMode.SKIP) for path in skip_files]
    return entries


@click.command(name="run")
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--only",
    "only_files",
    multiple=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Run only this file (and other --only files). Repeatable.",
)
@click.option(
    "--skip",
    "skip_files",
    multiple=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="List a file in the batch without running it. Repeatable.",
)
@click.option(
    "-c",
    "--config-path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
    default=None,
    envvar="TALLYTEST_CONF",
    show_envvar=True,
    help=f"Path to a tallytest configuration file (default: ./{DEFAULT_CONFIG_NAME} if present).",
)
@click.option("--env", "env_pairs", multiple=True, metavar="KEY=VALUE", help="Add a variable to the test environment.")
@click.option("--group-prefix", default=None, help="Prefix every group name, e.g. with the environment name.")
@click.option("--show-tests/--hide-tests", default=None, help="Print each test as it runs.")
@click.option("--show-totals/--hide-totals", default=None, help="Include the totals line.")
@click.option("--show-failing/--hide-failing", default=None, help="Include the failing tests section.")
@click.option("--show-passing/--hide-passing", default=None, help="Include the passing tests section.")
@click.option("--show-contents/--hide-contents", default=None, help="Include output printed by the tests.")
@click.option("--color/--no-color", default=None, help="Colorize PASS/FAIL tags.")
@click.option(
    "--report-file",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Also write the report to this file.",
)
@click.option("--overwrite", is_flag=True, default=None, help="Truncate the report file instead of appending.")
@logging_options
@click.pass_context
def run_cli(
    ctx: click.Context,
    files: tuple[Path, ...],
    only_files: tuple[Path, ...],
    skip_files: tuple[Path, ...],
    config_path: Path | None,
    env_pairs: tuple[str, ...],
    group_prefix: str | None,
    report_file: Path | None,
    overwrite: bool | None,
    **kwargs,
):
    """Run test files and print the results report."""
    setup_logging_from_context(ctx, kwargs)
    extra_env = parse_env_pairs(env_pairs)

    try:
        config = _load_run_config(config_path)
    except TallytestError as e:
        log.error("Failed to load or validate configuration", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_ERROR)

    if requested_log_level(ctx, kwargs.get("log_level")) is None:
        logging.getLogger().setLevel(config.global_config.numeric_log_level)

    overrides = {field: kwargs[flag] for flag, field in DISPLAY_FLAGS.items() if kwargs.get(flag) is not None}
    if report_file is not None:
        overrides["log_file"] = report_file
    if overwrite is not None:
        overrides["overwrite_log"] = overwrite
    options = attrs.evolve(config.display, **overrides)

    entries = _build_entries(config, files, only_files, skip_files)
    if not entries:
        raise click.UsageError("No test files given (pass FILES, --only, or a config file with [[files]]).")

    recorder = Recorder(options=options)
    recorder.set_env(config.env)
    recorder.add_env(extra_env)
    recorder.set_group_prefix(group_prefix or config.group_prefix)
    log.info("Executing 'run' command", files=len(entries), env_keys=sorted(recorder.environment))

    try:
        recorder.run_tests(entries)
    except TallytestError as e:
        log.error("Test run aborted", error=str(e))
        click.echo(f"Error: {e}", err=True)
        ctx.exit(EXIT_ERROR)
    except Exception as e:
        log.critical("Test run aborted by an unhandled exception", exc_info=True)
        click.echo(f"Error: test run aborted: {type(e).__name__}: {e}", err=True)
        ctx.exit(EXIT_ERROR)

    click.echo(recorder.get_results(), nl=False)
    if recorder.failure_count > 0:
        ctx.exit(EXIT_FAILURES)
    ctx.exit(EXIT_OK)

# 🔼⚙️
