"""
Command-line interface for daemonwatch.

Three actions make up a CI job's use of the monitor:

    daemonwatch start [--interval N]    spawn the background sampler
    daemonwatch sample [--interval N]   the sampler itself (run by `start`)
    daemonwatch cleanup                 stop the sampler, render and report

All actions accept a leading `--config PATH` to use a TOML file other than
the default `conf/config.toml`.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from ..collectors import JvmProcessInspector
from ..config import get_config, set_config_path, validate_interval
from ..models.config import MonitorConfig
from ..orchestration.cleanup import run_cleanup
from ..orchestration.supervisor import SamplerSupervisor
from ..sampling import run_sampler
from ..system.commands import check_jdk_tools_installed
from ..validation import MonitorStartupError, ValidationError, handle_cli_error

# --- Logging Setup ---
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

STEP_OUTPUT_ENV_VAR = "GITHUB_OUTPUT"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daemonwatch",
        description="Monitor memory of JVM build daemons during a CI build.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to config.toml (defaults to conf/config.toml).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("start", "Start the background sampler and wait for it to come up."),
        ("sample", "Run the sampling loop in the foreground until signalled."),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "-i",
            "--interval",
            type=float,
            help="Seconds between samples. Defaults to the configured interval (5).",
        )

    subparsers.add_parser(
        "cleanup",
        help="Stop the sampler, render the chart and diagram, publish and summarize.",
    )
    return parser


def _resolve_interval(value: Optional[float], config: MonitorConfig) -> float:
    if value is None:
        return config.collection.interval_seconds
    try:
        return validate_interval(value, field_name="--interval")
    except ValidationError as e:
        handle_cli_error(e, context="interval validation", exit_code=1, logger=logger)


def _write_step_output(name: str, value: object) -> None:
    """Expose a value to later CI steps when the platform provides an output file."""
    output_file = os.environ.get(STEP_OUTPUT_ENV_VAR)
    if not output_file:
        return
    with open(output_file, "a", encoding="utf-8") as f:
        f.write(f"{name}={value}\n")


def start_command(args: argparse.Namespace, config: MonitorConfig) -> int:
    interval = _resolve_interval(args.interval, config)
    if not check_jdk_tools_installed():
        logger.warning("jps/jstat not found; the sampler will record no JVM samples.")

    supervisor = SamplerSupervisor(config)
    try:
        handle = supervisor.spawn(interval=interval, config_path=args.config)
    except MonitorStartupError as e:
        logger.error("Monitor failed to start properly")
        if e.startup_log.strip():
            logger.error(f"Sampler startup log:\n{e.startup_log}")
        handle_cli_error(e, context="sampler startup", exit_code=1, logger=logger)

    _write_step_output("monitor_pid", handle.pid)
    logger.info(f"Sampler running with PID {handle.pid}, logging to {config.paths.log_file}")
    return 0


def sample_command(args: argparse.Namespace, config: MonitorConfig) -> int:
    interval = _resolve_interval(args.interval, config)
    run_sampler(config, JvmProcessInspector(), interval_seconds=interval)
    return 0


def cleanup_command(args: argparse.Namespace, config: MonitorConfig) -> int:
    try:
        result = run_cleanup(config)
    except Exception as e:
        handle_cli_error(
            e, context="cleanup", exit_code=1, include_traceback=True, logger=logger
        )
    logger.info(
        f"Cleanup finished: {result.statistics.series_count} series, "
        f"{len(result.chart_files)} chart file(s), {len(result.published_files)} artifact(s)"
    )
    return 0


COMMANDS = {
    "start": start_command,
    "sample": sample_command,
    "cleanup": cleanup_command,
}


def main_cli(argv: Optional[List[str]] = None) -> None:
    """
    Main command-line entry point.

    Raises:
        SystemExit: With code 0 on success and 1 on configuration errors,
            sampler startup failure, or an unexpected cleanup error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.config is not None:
        set_config_path(args.config)
    try:
        config = get_config()
    except Exception as e:
        handle_cli_error(
            error=e,
            context="configuration loading",
            exit_code=1,
            include_traceback=True,
            logger=logger,
        )

    sys.exit(COMMANDS[args.command](args, config))


if __name__ == "__main__":
    main_cli()
