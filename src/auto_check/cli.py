"""Command-line entry point for the auto-check watcher."""

import logging
import logging.config
import sys
from typing import Any

import click
from pydantic import ValidationError

from auto_check import __version__
from auto_check.config import AutoCheckConfig
from auto_check.ignore import IgnoreFilter
from auto_check.models import ConfigurationError, IgnoreRulesError, MonitoringError, TransportError
from auto_check.monitoring import (
    ChangeAggregator,
    DriverLoop,
    InhibitionFlag,
    PipelineRunner,
    WatchdogEventSource,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def load_config(overrides: dict[str, Any]) -> AutoCheckConfig:
    """
    Build the configuration from environment plus command-line overrides.

    Raises:
        ConfigurationError: If the options are invalid or leave nothing to run
    """
    try:
        return AutoCheckConfig(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(f"Invalid value for {key}: {first.get('msg')}", config_key=key) from e


def run(config: AutoCheckConfig) -> int:
    """Wire the components together and watch until interrupted."""
    ignore_filter = IgnoreFilter(config.base_dir, config.ignore_file)
    inhibition = InhibitionFlag()
    aggregator = ChangeAggregator(config.base_dir, ignore_filter, inhibition)
    runner = PipelineRunner(config.build_command_spec(), config.base_dir, inhibition)
    source = WatchdogEventSource()
    driver = DriverLoop(source, aggregator, runner, config.delay_seconds)

    source.watch(config.base_dir, recursive=True)
    if not config.no_initial_run:
        driver.queue_initial_run()

    runner.start()
    try:
        driver.run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    finally:
        driver.stop()
        source.stop()
        runner.stop(timeout=5.0)
        logger.debug("Driver stats: %s, runner stats: %s", driver.get_stats(), runner.get_stats())
    return EXIT_OK


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("base_dir", type=click.Path(file_okay=False, path_type=str))
@click.option("-v", "--verbose", "verbosity", count=True, help="Increase verbosity; default is errors only.")
@click.option("--delay", "delay_ms", type=int, default=None, help="Delay in milliseconds before triggering [default: 1000]")
@click.option("--custom-command", default=None, help="Extra command appended after the built-in ones.")
@click.option("--no-check", is_flag=True, help="Do not run 'cargo check'.")
@click.option("--no-clippy", is_flag=True, help="Do not run 'cargo clippy'.")
@click.option("--no-test", is_flag=True, help="Do not run 'cargo test'.")
@click.option("--no-initial-run", is_flag=True, help="Do not run the commands at startup.")
@click.option("--ignore-file", default=None, help="Ignore rules file inside BASE_DIR [default: .gitignore]")
@click.version_option(__version__, prog_name="auto-check")
def main(
    base_dir: str,
    verbosity: int,
    delay_ms: int | None,
    custom_command: str | None,
    no_check: bool,
    no_clippy: bool,
    no_test: bool,
    no_initial_run: bool,
    ignore_file: str | None,
) -> None:
    """Watch BASE_DIR and run the check commands whenever files change."""
    overrides: dict[str, Any] = {"base_dir": base_dir}
    if verbosity:
        overrides["verbosity"] = verbosity
    if delay_ms is not None:
        overrides["delay_ms"] = delay_ms
    if custom_command is not None:
        overrides["custom_command"] = custom_command
    if ignore_file is not None:
        overrides["ignore_file"] = ignore_file
    for name, flag in (
        ("no_check", no_check),
        ("no_clippy", no_clippy),
        ("no_test", no_test),
        ("no_initial_run", no_initial_run),
    ):
        if flag:
            overrides[name] = True

    try:
        config = load_config(overrides)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    logging.config.dictConfig(config.get_log_config())

    try:
        exit_code = run(config)
    except (IgnoreRulesError, MonitoringError) as e:
        logger.error("Setup failed: %s", e)
        exit_code = EXIT_FAILURE
    except TransportError as e:
        logger.error("Event stream died, cannot keep watching: %s", e)
        exit_code = EXIT_FAILURE
    sys.exit(exit_code)
