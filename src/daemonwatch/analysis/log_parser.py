"""
Rebuilds per-process series from the sampler's log.

Parsing never fails on content: the two header lines are skipped, and any
later line that is not a well-formed record (wrong field count, unparseable
or non-finite number, or a half-written last line) is dropped.
"""

import logging
import math
from pathlib import Path
from typing import Dict, List, Optional

from ..models.samples import (
    LOG_FIELD_COUNT,
    LOG_FIELD_SEPARATOR,
    MB_SUFFIX,
    ParsedLog,
    Sample,
    Series,
    SeriesKey,
    timeline_sort_key,
)

logger = logging.getLogger(__name__)

HEADER_LINE_COUNT = 2


def _parse_megabytes(raw: str) -> float:
    value = raw.strip()
    if value.endswith(MB_SUFFIX):
        value = value[: -len(MB_SUFFIX)]
    megabytes = float(value.strip())
    if not math.isfinite(megabytes):
        raise ValueError(f"non-finite memory value: {raw!r}")
    return megabytes


def parse_log_line(line: str) -> Optional[Sample]:
    """
    Parse one record line. Returns None for anything malformed.
    """
    fields = [part.strip() for part in line.strip().split(LOG_FIELD_SEPARATOR)]
    if len(fields) != LOG_FIELD_COUNT:
        return None

    timestamp, pid, name, heap_used, heap_capacity, rss = fields
    try:
        return Sample(
            timestamp=timestamp,
            pid=int(pid),
            name=name,
            heap_used_mb=_parse_megabytes(heap_used),
            heap_capacity_mb=_parse_megabytes(heap_capacity),
            rss_mb=_parse_megabytes(rss),
        )
    except ValueError:
        return None


def build_parsed_log(samples: List[Sample]) -> ParsedLog:
    """Group samples into series and derive the sorted timeline."""
    timestamps_by_key: Dict[SeriesKey, List[str]] = {}
    rss_by_key: Dict[SeriesKey, List[float]] = {}
    for sample in samples:
        key = sample.key
        timestamps_by_key.setdefault(key, []).append(sample.timestamp)
        rss_by_key.setdefault(key, []).append(sample.rss_mb)

    series = {
        key: Series(key=key, timestamps=tuple(timestamps), rss=tuple(rss_by_key[key]))
        for key, timestamps in timestamps_by_key.items()
    }
    timeline = tuple(
        sorted({sample.timestamp for sample in samples}, key=timeline_sort_key)
    )
    return ParsedLog(series=series, timeline=timeline, samples=tuple(samples))


def parse_log_text(text: str) -> ParsedLog:
    """
    Parse the full text of a log.

    Args:
        text: Log content including the two header lines.

    Returns:
        A ParsedLog with one Series per (pid, name) pair seen.
    """
    samples: List[Sample] = []
    dropped = 0
    for line in text.splitlines()[HEADER_LINE_COUNT:]:
        if not line.strip():
            continue
        sample = parse_log_line(line)
        if sample is None:
            dropped += 1
            logger.debug(f"Dropping malformed log line: {line!r}")
            continue
        samples.append(sample)

    if dropped:
        logger.info(f"Dropped {dropped} malformed log line(s)")
    return build_parsed_log(samples)


def parse_log_file(log_path: Path) -> ParsedLog:
    """
    Read and parse a log file. A missing file yields an empty result.
    """
    if not log_path.exists():
        logger.warning(f"Memory log not found: {log_path}. Treating as empty.")
        return ParsedLog.empty()

    parsed = parse_log_text(log_path.read_text(encoding="utf-8", errors="replace"))
    logger.info(
        f"Parsed {len(parsed.samples)} samples in {len(parsed.series)} series "
        f"over {len(parsed.timeline)} timestamps from {log_path}"
    )
    return parsed
