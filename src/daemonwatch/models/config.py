"""
Configuration data models.

This module contains the configuration structures for sampling, file
locations, sampler lifecycle, and reporting, as loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

DEFAULT_WATCHED_PROCESSES = ["GradleDaemon", "KotlinCompileDaemon", "GradleWorkerMain"]


@dataclass
class CollectionConfig:
    """
    Settings for the sampling loop, from `[monitor.collection]`.
    """

    # Seconds to wait between two ticks.
    interval_seconds: float = 5.0
    # Exact JVM main-class names to watch, as reported by `jps`.
    watched_processes: List[str] = field(
        default_factory=lambda: list(DEFAULT_WATCHED_PROCESSES)
    )


@dataclass
class PathsConfig:
    """
    Locations of the files shared between the sampler and the cleanup step,
    from `[monitor.paths]`.
    """

    log_file: Path = Path("build_process_watcher.log")
    pid_file: Path = Path("monitor.pid")
    chart_file: Path = Path("memory_usage.svg")
    # Captures the sampler's own stdout/stderr while it starts up.
    startup_log_file: Path = Path("java_mem_monitor.log")


@dataclass
class LifecycleConfig:
    """
    Timing of the detached sampler, from `[monitor.lifecycle]`.
    """

    # How long `start` waits for the PID file to appear.
    startup_grace_seconds: float = 2.0
    # How long cleanup waits for the sampler to exit before killing it.
    stop_timeout_seconds: float = 5.0


@dataclass
class ReportConfig:
    """
    Output settings for artifacts and the build summary, from `[monitor.report]`.
    """

    artifact_dir: Path = Path("monitor-artifacts")
    # Environment variable naming the platform's build-summary file.
    summary_env_var: str = "GITHUB_STEP_SUMMARY"


@dataclass
class MonitorConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    collection: CollectionConfig = field(default_factory=CollectionConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    lifecycle: LifecycleConfig = field(default_factory=LifecycleConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
