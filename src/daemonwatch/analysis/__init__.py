"""
Offline analysis of the sampler's log: parsing, aggregation, downsampling and
run statistics.
"""

from .aggregation import (
    aggregate_at,
    aggregate_series,
    downsample_indices,
    downsample_stride,
    downsample_timeline,
    target_point_count,
)
from .log_parser import parse_log_file, parse_log_line, parse_log_text
from .statistics import (
    NO_DATA_DURATION,
    RunStatistics,
    SeriesStatistics,
    compute_statistics,
    samples_frame,
)

__all__ = [
    "aggregate_at",
    "aggregate_series",
    "downsample_indices",
    "downsample_stride",
    "downsample_timeline",
    "target_point_count",
    "parse_log_file",
    "parse_log_line",
    "parse_log_text",
    "NO_DATA_DURATION",
    "RunStatistics",
    "SeriesStatistics",
    "compute_statistics",
    "samples_frame",
]
