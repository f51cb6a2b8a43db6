"""
Run statistics for the build summary.

Per-series figures are computed with polars over the parsed samples, grouped
by the (pid, name) pair in order of first appearance.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import polars as pl

from ..models.samples import ParsedLog, SeriesKey

logger = logging.getLogger(__name__)

NO_DATA_DURATION = "N/A"

_SAMPLE_SCHEMA = {"pid": pl.Int64, "name": pl.Utf8, "rss_mb": pl.Float64}


@dataclass(frozen=True)
class SeriesStatistics:
    key: SeriesKey
    max_rss_mb: float
    avg_rss_mb: float
    last_rss_mb: float
    sample_count: int

    @property
    def label(self) -> str:
        return self.key.label


@dataclass(frozen=True)
class RunStatistics:
    """
    Attributes:
        max_rss_mb: Highest single-process RSS, or None when nothing was sampled.
        series_count: Number of distinct process instances.
        duration: "from <first> to <last>", or "N/A" without data.
        first_timestamp: First timeline entry, if any.
        last_timestamp: Last timeline entry, if any.
        per_series: Statistics per series in order of first appearance.
    """

    max_rss_mb: Optional[float]
    series_count: int
    duration: str
    first_timestamp: Optional[str]
    last_timestamp: Optional[str]
    per_series: List[SeriesStatistics]

    @property
    def has_data(self) -> bool:
        return self.max_rss_mb is not None


def samples_frame(parsed: ParsedLog) -> pl.DataFrame:
    """One row per sample with pid, name and rss_mb, in log order."""
    return pl.DataFrame(
        {
            "pid": [sample.pid for sample in parsed.samples],
            "name": [sample.name for sample in parsed.samples],
            "rss_mb": [sample.rss_mb for sample in parsed.samples],
        },
        schema=_SAMPLE_SCHEMA,
    )


def monitoring_duration(parsed: ParsedLog) -> str:
    if parsed.is_empty:
        return NO_DATA_DURATION
    return f"from {parsed.timeline[0]} to {parsed.timeline[-1]}"


def compute_statistics(parsed: ParsedLog) -> RunStatistics:
    """
    Compute overall and per-series statistics for a parsed log.

    An empty log yields a RunStatistics with `has_data` False.
    """
    df = samples_frame(parsed)
    if df.is_empty():
        logger.info("No samples recorded; statistics report no data")
        return RunStatistics(
            max_rss_mb=None,
            series_count=0,
            duration=NO_DATA_DURATION,
            first_timestamp=None,
            last_timestamp=None,
            per_series=[],
        )

    per_series_df = df.group_by(["pid", "name"], maintain_order=True).agg(
        pl.col("rss_mb").max().alias("max_rss_mb"),
        pl.col("rss_mb").mean().alias("avg_rss_mb"),
        pl.col("rss_mb").last().alias("last_rss_mb"),
        pl.col("rss_mb").count().alias("sample_count"),
    )

    per_series = [
        SeriesStatistics(
            key=SeriesKey(row["pid"], row["name"]),
            max_rss_mb=row["max_rss_mb"],
            avg_rss_mb=row["avg_rss_mb"],
            last_rss_mb=row["last_rss_mb"],
            sample_count=int(row["sample_count"]),
        )
        for row in per_series_df.iter_rows(named=True)
    ]

    return RunStatistics(
        max_rss_mb=df["rss_mb"].max(),
        series_count=per_series_df.height,
        duration=monitoring_duration(parsed),
        first_timestamp=parsed.timeline[0],
        last_timestamp=parsed.timeline[-1],
        per_series=per_series,
    )
