"""
daemonwatch: memory monitoring for JVM build daemons in CI.

A background sampler records heap and resident memory of watched daemons
(Gradle, Kotlin compile daemon, Gradle workers) into a pipe-delimited log.
At the end of the job the cleanup step turns the log into a Mermaid diagram,
a Plotly SVG chart and summary statistics.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Input validation and error handling
- system: Running the JDK command-line tools
- collectors: Process discovery and memory readings
- sampling: The sampling loop
- analysis: Log parsing, aggregation, downsampling, statistics
- rendering: Mermaid diagram and Plotly chart
- reporting: Build summary and artifact publishing
- orchestration: Sampler lifecycle and the cleanup pipeline
- cli: Command-line interface

Usage:
    daemonwatch start --interval 5
    ./gradlew build
    daemonwatch cleanup
"""

from .analysis import (
    aggregate_at,
    aggregate_series,
    compute_statistics,
    downsample_timeline,
    parse_log_file,
    parse_log_text,
)
from .config import clear_config_cache, get_config, set_config_path
from .models import MonitorConfig, ParsedLog, Sample, Series, SeriesKey
from .rendering import build_chart, build_diagram, render_diagram
from .reporting import compose_summary
from .validation import MonitorStartupError, ProcessUnavailableError, ValidationError

__version__ = "1.0.0"

__all__ = [
    "aggregate_at",
    "aggregate_series",
    "compute_statistics",
    "downsample_timeline",
    "parse_log_file",
    "parse_log_text",
    "clear_config_cache",
    "get_config",
    "set_config_path",
    "MonitorConfig",
    "ParsedLog",
    "Sample",
    "Series",
    "SeriesKey",
    "build_chart",
    "build_diagram",
    "render_diagram",
    "compose_summary",
    "MonitorStartupError",
    "ProcessUnavailableError",
    "ValidationError",
]
