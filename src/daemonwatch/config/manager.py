"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import MonitorConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import load_main_config
from .validators import validate_monitor_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[MonitorConfig] = None

# Default path to the configuration file, relative to this script's location.
# Overridden by the CLI `--config` option or by tests.
_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Clears any cached configuration so the next `get_config()` call reads
    the new file.

    Args:
        config_path: Path to config.toml
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = config_path
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """Clear the cached configuration, forcing a reload on next access."""
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path) -> MonitorConfig:
    """
    Load the application configuration from TOML.

    A missing file is not an error: the monitor runs with built-in defaults,
    which is how it is normally used inside a CI job.

    Raises:
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If the TOML file is malformed
    """
    if not config_path.exists():
        logger.info(f"No configuration file at {config_path}; using defaults")
        return MonitorConfig()

    try:
        monitor_data = load_main_config(config_path)
        config = validate_monitor_config(monitor_data)
        logger.info(
            f"Loaded configuration watching {config.collection.watched_processes} "
            f"every {config.collection.interval_seconds}s"
        )
        return config
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> MonitorConfig:
    """
    Get the global application configuration, loading it if necessary.

    Returns:
        The singleton MonitorConfig instance
    """
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    return _CONFIG is not None
