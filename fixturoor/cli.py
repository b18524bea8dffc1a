"""CLI entry point for fixturoor."""

import asyncio
import logging
import sys
from typing import Optional

import click

from .config import Config, DEFAULT_BENCHMARK_DIR, DEFAULT_ENDPOINT, DEFAULT_FIXTURE_DIR
from .errors import FixtureError

EXIT_NOTE = (
    "Errors are logged and the command still exits with status 0. "
    "Pass --fail-on-error to exit with status 1 instead."
)


def setup_logging(level: str) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if level.upper() != "DEBUG":
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def common_options(func):
    """Options shared by every generate command."""
    options = [
        click.option(
            "--spec",
            required=True,
            type=click.Choice(["mainnet", "minimal"], case_sensitive=False),
            help="Network spec the beacon node runs",
            envvar="FIXTUROOR_SPEC",
        ),
        click.option(
            "--url",
            default=DEFAULT_ENDPOINT,
            help="Beacon node HTTP endpoint",
            envvar="FIXTUROOR_URL",
        ),
        click.option(
            "--config",
            "relay_config",
            type=click.Path(exists=True),
            help="Relay config (JSON or YAML) overriding the spec timing values",
            envvar="FIXTUROOR_CONFIG",
        ),
        click.option(
            "--fixture-dir",
            default=DEFAULT_FIXTURE_DIR,
            type=click.Path(),
            help="Directory the JSON fixtures are written to",
            envvar="FIXTUROOR_FIXTURE_DIR",
        ),
        click.option(
            "--log-level",
            default="INFO",
            type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
            help="Logging level",
            envvar="FIXTUROOR_LOG_LEVEL",
        ),
        click.option(
            "--fail-on-error",
            is_flag=True,
            default=False,
            help="Exit with status 1 when generation fails",
            envvar="FIXTUROOR_FAIL_ON_ERROR",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def run_command(coro_factory, config: Config, fail_on_error: bool, action: str) -> None:
    """Run a pipeline coroutine, logging failures instead of raising them."""
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(coro_factory(config))
    except FixtureError as e:
        logger.error(f"Error {action}: stage={e.stage}, spec={e.spec or config.spec}, {e}")
        if fail_on_error:
            sys.exit(1)
    except Exception as e:
        logger.error(f"Error {action}: spec={config.spec}, unexpected {type(e).__name__}: {e}")
        if fail_on_error:
            sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(1)


@click.group()
@click.version_option(package_name="fixturoor")
def cli():
    """Fixturoor - Beacon light-client fixture generator."""
    pass


@cli.command("generate-beacon-checkpoint", epilog=EXIT_NOTE)
@common_options
@click.option(
    "--export-json/--no-export-json",
    default=True,
    help="Also write the checkpoint to dump-initial-checkpoint.json",
    envvar="FIXTUROOR_EXPORT_JSON",
)
def generate_beacon_checkpoint(
    spec: str,
    url: str,
    relay_config: Optional[str],
    fixture_dir: str,
    log_level: str,
    fail_on_error: bool,
    export_json: bool,
):
    """Print the hex-encoded force_checkpoint call for the latest checkpoint."""
    setup_logging(log_level)
    from .pipeline import generate_checkpoint

    config = Config(
        spec=spec.lower(),
        endpoint=url,
        fixture_dir=fixture_dir,
        relay_config_path=relay_config or "",
        export_json=export_json,
        log_level=log_level,
    )
    run_command(generate_checkpoint, config, fail_on_error, "generating beacon checkpoint")


@cli.command("generate-beacon-data", epilog=EXIT_NOTE)
@common_options
@click.option(
    "--benchmark-dir",
    default=DEFAULT_BENCHMARK_DIR,
    type=click.Path(),
    help="Directory the benchmark fixtures file is written to",
    envvar="FIXTUROOR_BENCHMARK_DIR",
)
@click.option(
    "--template",
    type=click.Path(exists=True),
    help="Mustache template for the benchmark file (defaults to the packaged one)",
    envvar="FIXTUROOR_TEMPLATE",
)
@click.option(
    "--wait-seconds",
    default=30.0,
    type=float,
    help="Seconds to wait for the chain to advance after the checkpoint",
    envvar="FIXTUROOR_WAIT_SECONDS",
)
@click.option(
    "--emit-benchmark/--no-emit-benchmark",
    default=None,
    help="Render the benchmark file (default: mainnet only)",
    envvar="FIXTUROOR_EMIT_BENCHMARK",
)
def generate_beacon_data(
    spec: str,
    url: str,
    relay_config: Optional[str],
    fixture_dir: str,
    log_level: str,
    fail_on_error: bool,
    benchmark_dir: str,
    template: Optional[str],
    wait_seconds: float,
    emit_benchmark: Optional[bool],
):
    """Generate the light-client test fixtures and benchmark data."""
    setup_logging(log_level)
    from .pipeline import generate_beacon_data as run_generate_beacon_data

    config = Config(
        spec=spec.lower(),
        endpoint=url,
        fixture_dir=fixture_dir,
        benchmark_dir=benchmark_dir,
        template_path=template or "",
        relay_config_path=relay_config or "",
        sync_wait_seconds=wait_seconds,
        emit_benchmark_artifacts=emit_benchmark,
        log_level=log_level,
    )
    run_command(run_generate_beacon_data, config, fail_on_error, "generating beacon data")


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
