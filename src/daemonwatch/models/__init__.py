"""
Data models for the monitor.

Configuration Models:
- Sampling, path, lifecycle and report settings

Sample Models:
- Log records written by the sampler
- Per-process series and the shared timeline rebuilt by the parser
"""

from .config import (
    DEFAULT_WATCHED_PROCESSES,
    CollectionConfig,
    LifecycleConfig,
    MonitorConfig,
    PathsConfig,
    ReportConfig,
)
from .samples import (
    LOG_COLUMN_HEADER,
    LOG_FIELD_COUNT,
    LOG_FIELD_SEPARATOR,
    LOG_START_PREFIX,
    MB_SUFFIX,
    ParsedLog,
    Sample,
    Series,
    SeriesKey,
    timeline_sort_key,
)

__all__ = [
    # Configuration
    "DEFAULT_WATCHED_PROCESSES",
    "CollectionConfig",
    "LifecycleConfig",
    "MonitorConfig",
    "PathsConfig",
    "ReportConfig",
    # Samples
    "LOG_COLUMN_HEADER",
    "LOG_FIELD_COUNT",
    "LOG_FIELD_SEPARATOR",
    "LOG_START_PREFIX",
    "MB_SUFFIX",
    "ParsedLog",
    "Sample",
    "Series",
    "SeriesKey",
    "timeline_sort_key",
]
