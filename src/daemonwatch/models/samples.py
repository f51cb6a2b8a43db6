"""
Sample and time-series data models.

A `Sample` is one line of the sampler's log. The offline pass rebuilds one
`Series` per observed process instance and a shared timeline from those
lines; the result is held in a `ParsedLog` that every renderer receives as
read-only input.

Log layout:

    Starting memory monitor at <date>
    Elapsed_Time | PID | Name | Heap_Used_MB | Heap_Capacity_MB | RSS_MB
    00:00:05 | 4242 | GradleDaemon | 512.3MB | 1024.0MB | 801.7MB
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

LOG_START_PREFIX = "Starting memory monitor at"
LOG_COLUMN_HEADER = "Elapsed_Time | PID | Name | Heap_Used_MB | Heap_Capacity_MB | RSS_MB"
LOG_FIELD_SEPARATOR = "|"
LOG_FIELD_COUNT = 6
MB_SUFFIX = "MB"


@dataclass(frozen=True)
class Sample:
    """
    One observation of one watched process on one tick.

    Attributes:
        timestamp: Elapsed time since sampler start as HH:MM:SS.
        pid: OS process id. The OS may reuse it once the process dies.
        name: Watched process name (JVM main class).
        heap_used_mb: Eden + old generation usage in MB.
        heap_capacity_mb: Eden + old generation capacity in MB.
        rss_mb: Resident set size in MB.
    """

    timestamp: str
    pid: int
    name: str
    heap_used_mb: float
    heap_capacity_mb: float
    rss_mb: float

    @property
    def key(self) -> "SeriesKey":
        return SeriesKey(self.pid, self.name)

    def to_log_line(self) -> str:
        """Render the sample as one pipe-delimited log record."""
        return (
            f"{self.timestamp} | {self.pid} | {self.name} | "
            f"{self.heap_used_mb:.1f}{MB_SUFFIX} | "
            f"{self.heap_capacity_mb:.1f}{MB_SUFFIX} | "
            f"{self.rss_mb:.1f}{MB_SUFFIX}"
        )


@dataclass(frozen=True)
class SeriesKey:
    """
    Identity of one monitored process instance.

    Equality uses the (pid, name) pair. `label` is for display only.
    """

    pid: int
    name: str

    @property
    def label(self) -> str:
        return f"{self.pid}-{self.name}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class Series:
    """
    Ordered RSS history of one process instance.

    `timestamps` and `rss` are parallel tuples in log order.
    """

    key: SeriesKey
    timestamps: Tuple[str, ...]
    rss: Tuple[float, ...]
    _index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if len(self.timestamps) != len(self.rss):
            raise ValueError(
                f"Series {self.key.label}: {len(self.timestamps)} timestamps "
                f"but {len(self.rss)} values"
            )
        # First occurrence wins if a timestamp is repeated.
        index: Dict[str, int] = {}
        for i, timestamp in enumerate(self.timestamps):
            index.setdefault(timestamp, i)
        object.__setattr__(self, "_index", index)

    def __len__(self) -> int:
        return len(self.timestamps)

    def has(self, timestamp: str) -> bool:
        return timestamp in self._index

    def value_at(self, timestamp: str) -> float:
        """Return the RSS at `timestamp`. Raises KeyError when absent."""
        return self.rss[self._index[timestamp]]


@dataclass(frozen=True)
class ParsedLog:
    """
    Everything the renderers need from one pass over the log.

    Attributes:
        series: Series by key, in order of first appearance in the log.
        timeline: Distinct timestamps across all series, sorted.
        samples: Every accepted sample in log order.
    """

    series: Mapping[SeriesKey, Series]
    timeline: Tuple[str, ...]
    samples: Tuple[Sample, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.timeline

    @classmethod
    def empty(cls) -> "ParsedLog":
        return cls(series={}, timeline=(), samples=())


def timeline_sort_key(timestamp: str) -> Tuple[int, str]:
    """
    Sort key for HH:MM:SS timestamps.

    Equal to plain string ordering while the hour field is two digits wide;
    wider hour fields (100h and above) sort after narrower ones.
    """
    return (len(timestamp), timestamp)
