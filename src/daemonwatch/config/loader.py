"""
Reading of `config.toml`.

Only the `[monitor]` table matters to daemonwatch; anything else in the file
is ignored so the monitor's settings can live in a shared CI config file.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import ErrorSeverity, ValidationError, handle_config_error

logger = logging.getLogger(__name__)

MONITOR_TABLE = "monitor"
KNOWN_SECTIONS = frozenset({"collection", "paths", "lifecycle", "report"})


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Parse a TOML file.

    Raises:
        FileNotFoundError: If `file_path` does not exist
        tomllib.TOMLDecodeError: If the content is not valid TOML
    """
    if not file_path.is_file():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    logger.debug(f"Reading {description} {file_path}")
    try:
        with file_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description} {file_path}",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger,
        )
        raise


def load_main_config(config_path: Path) -> Dict[str, Any]:
    """
    Return the `[monitor]` table of `config_path`.

    A file without the table yields an empty dict, meaning all defaults.
    Sections other than the known four are reported and otherwise ignored.

    Raises:
        ValidationError: If `monitor` is present but is not a table
    """
    data = load_toml_file(config_path, "main configuration file")
    monitor_data = data.get(MONITOR_TABLE, {})
    if not isinstance(monitor_data, dict):
        raise ValidationError(
            f"[{MONITOR_TABLE}] in {config_path} must be a table",
            field_name=MONITOR_TABLE,
            value=monitor_data,
        )

    unknown = sorted(set(monitor_data) - KNOWN_SECTIONS)
    if unknown:
        logger.warning(f"Ignoring unknown [{MONITOR_TABLE}] sections in {config_path}: {unknown}")
    return monitor_data
