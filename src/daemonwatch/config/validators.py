"""
Configuration validation utilities.

Turns the raw `[monitor]` table into a validated `MonitorConfig`. Every key is
optional; missing keys take the dataclass defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict

from ..models.config import (
    CollectionConfig,
    LifecycleConfig,
    MonitorConfig,
    PathsConfig,
    ReportConfig,
)
from ..validation import (
    ValidationError,
    validate_name_list,
    validate_non_empty_string,
    validate_positive_float,
)

logger = logging.getLogger(__name__)

MIN_INTERVAL_SECONDS = 0.1
MAX_INTERVAL_SECONDS = 3600.0
MAX_WATCHED_PROCESSES = 8


def validate_interval(value: Any, field_name: str = "interval_seconds") -> float:
    """Validate a sampling interval in seconds."""
    return validate_positive_float(
        value,
        min_value=MIN_INTERVAL_SECONDS,
        max_value=MAX_INTERVAL_SECONDS,
        field_name=field_name,
    )


def _validate_path(value: Any, field_name: str) -> Path:
    return Path(validate_non_empty_string(value, field_name=field_name))


def validate_collection_config(data: Dict[str, Any]) -> CollectionConfig:
    defaults = CollectionConfig()
    return CollectionConfig(
        interval_seconds=validate_interval(
            data.get("interval_seconds", defaults.interval_seconds),
            field_name="monitor.collection.interval_seconds",
        ),
        watched_processes=validate_name_list(
            data.get("watched_processes", defaults.watched_processes),
            max_items=MAX_WATCHED_PROCESSES,
            field_name="monitor.collection.watched_processes",
        ),
    )


def validate_paths_config(data: Dict[str, Any]) -> PathsConfig:
    defaults = PathsConfig()
    resolved = {}
    for name in ("log_file", "pid_file", "chart_file", "startup_log_file"):
        resolved[name] = _validate_path(
            data.get(name, str(getattr(defaults, name))),
            field_name=f"monitor.paths.{name}",
        )

    if resolved["log_file"] == resolved["pid_file"]:
        raise ValidationError(
            "monitor.paths.log_file and monitor.paths.pid_file must differ",
            field_name="monitor.paths",
        )
    if resolved["chart_file"].suffix.lower() != ".svg":
        raise ValidationError(
            f"monitor.paths.chart_file must end in .svg, got {resolved['chart_file']}",
            field_name="monitor.paths.chart_file",
            value=str(resolved["chart_file"]),
        )
    return PathsConfig(**resolved)


def validate_lifecycle_config(data: Dict[str, Any]) -> LifecycleConfig:
    defaults = LifecycleConfig()
    return LifecycleConfig(
        startup_grace_seconds=validate_positive_float(
            data.get("startup_grace_seconds", defaults.startup_grace_seconds),
            min_value=0.1,
            max_value=120.0,
            field_name="monitor.lifecycle.startup_grace_seconds",
        ),
        stop_timeout_seconds=validate_positive_float(
            data.get("stop_timeout_seconds", defaults.stop_timeout_seconds),
            min_value=0.1,
            max_value=300.0,
            field_name="monitor.lifecycle.stop_timeout_seconds",
        ),
    )


def validate_report_config(data: Dict[str, Any]) -> ReportConfig:
    defaults = ReportConfig()
    return ReportConfig(
        artifact_dir=_validate_path(
            data.get("artifact_dir", str(defaults.artifact_dir)),
            field_name="monitor.report.artifact_dir",
        ),
        summary_env_var=validate_non_empty_string(
            data.get("summary_env_var", defaults.summary_env_var),
            field_name="monitor.report.summary_env_var",
        ),
    )


def validate_monitor_config(monitor_data: Dict[str, Any]) -> MonitorConfig:
    """
    Validate and create a MonitorConfig from raw configuration data.

    Args:
        monitor_data: Raw `[monitor]` table from TOML

    Returns:
        Validated MonitorConfig instance

    Raises:
        ValidationError: If validation fails
    """
    for section in ("collection", "paths", "lifecycle", "report"):
        if not isinstance(monitor_data.get(section, {}), dict):
            raise ValidationError(
                f"monitor.{section} must be a table",
                field_name=f"monitor.{section}",
            )

    config = MonitorConfig(
        collection=validate_collection_config(monitor_data.get("collection", {})),
        paths=validate_paths_config(monitor_data.get("paths", {})),
        lifecycle=validate_lifecycle_config(monitor_data.get("lifecycle", {})),
        report=validate_report_config(monitor_data.get("report", {})),
    )
    logger.debug(f"Validated monitor configuration: {config}")
    return config
