"""
Aggregate series and timeline downsampling.

The aggregate at a timestamp is the plain sum over the series sampled at that
exact timestamp; a series with no entry there adds nothing (no
interpolation). Downsampling only thins the timeline for the diagram; the
chart always plots the full timeline.
"""

import math
from typing import List, Mapping, Sequence

from ..models.samples import Series, SeriesKey

SHORT_RUN_POINTS = 30
MEDIUM_RUN_POINTS = 100
MEDIUM_RUN_TARGET = 20
LONG_RUN_TARGET = 30


def aggregate_at(series: Mapping[SeriesKey, Series], timestamp: str) -> float:
    """Sum the RSS of every series that has a sample at `timestamp`."""
    return sum((s.value_at(timestamp) for s in series.values() if s.has(timestamp)), 0.0)


def aggregate_series(
    series: Mapping[SeriesKey, Series], timeline: Sequence[str]
) -> List[float]:
    """Aggregate value for each timestamp of `timeline`, in order."""
    return [aggregate_at(series, timestamp) for timestamp in timeline]


def target_point_count(n: int) -> int:
    """
    How many points the diagram should show for a timeline of length `n`.

    Short runs keep every point, medium runs about 20, long runs about 30.
    """
    if n < SHORT_RUN_POINTS:
        return n
    if n < MEDIUM_RUN_POINTS:
        return MEDIUM_RUN_TARGET
    return LONG_RUN_TARGET


def downsample_stride(n: int) -> int:
    if n <= 0:
        return 1
    return math.ceil(n / target_point_count(n))


def downsample_indices(n: int) -> List[int]:
    """Indices 0, stride, 2*stride, ... below `n`."""
    return list(range(0, n, downsample_stride(n)))


def downsample_timeline(timeline: Sequence[str]) -> List[str]:
    """
    Thin `timeline` for the diagram. Always keeps the first timestamp; the
    last one is kept only if it falls on the stride.
    """
    return [timeline[i] for i in downsample_indices(len(timeline))]
