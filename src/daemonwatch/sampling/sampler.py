"""
The sampling loop.

Every tick the sampler lists live JVMs, keeps those whose name is on the
watch list, reads their heap counters and resident memory, and appends one
line per process to the log. A process that cannot be read on a tick is
skipped for that tick; nothing is written for it.
"""

import logging
import os
import threading
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from ..collectors.base import AbstractProcessInspector
from ..models.config import MonitorConfig
from ..models.samples import LOG_COLUMN_HEADER, LOG_START_PREFIX, Sample
from ..orchestration.signal_handler import SignalHandler
from ..validation import ProcessUnavailableError

logger = logging.getLogger(__name__)

KB_PER_MB = 1024


def format_elapsed(seconds: float) -> str:
    """
    Format elapsed seconds as zero-padded HH:MM:SS.

    The hour field is not wrapped at 24 and grows past two digits if needed.
    """
    total = max(int(seconds), 0)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def kb_to_mb(value_kb: float) -> float:
    return round(value_kb / KB_PER_MB, 1)


class MemorySampler:
    """
    Periodically samples watched JVM daemons into an append-only log.

    Attributes:
        inspector: Source of process listings and memory readings.
        log_path: The log file, recreated by `start_log()`.
        interval_seconds: Wait between the end of one tick and the next.
        watched_names: Exact process names to sample.
        stop_event: Set to end the loop after the current tick.
    """

    def __init__(
        self,
        inspector: AbstractProcessInspector,
        log_path: Path,
        interval_seconds: float = 5.0,
        watched_names: Iterable[str] = (),
        clock: Callable[[], float] = time.monotonic,
        stop_event: Optional[threading.Event] = None,
    ):
        self.inspector = inspector
        self.log_path = Path(log_path)
        self.interval_seconds = interval_seconds
        self.watched_names = frozenset(watched_names)
        self.clock = clock
        self.stop_event = stop_event or threading.Event()
        self._start_time: Optional[float] = None
        self.ticks_completed = 0

    def start_log(self) -> None:
        """Create the log fresh and write the run header and column header."""
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        started_at = time.strftime("%a %b %d %H:%M:%S %Z %Y")
        with open(self.log_path, "w", encoding="utf-8") as f:
            f.write(f"{LOG_START_PREFIX} {started_at}\n")
            f.write(f"{LOG_COLUMN_HEADER}\n")
        logger.info(f"Memory log started at {self.log_path}")

    def sample_process(self, pid: int, name: str, timestamp: str) -> Optional[Sample]:
        """
        Read one process. Returns None when any reading is unavailable.
        """
        try:
            counters = self.inspector.read_gc_counters(pid)
            rss_kb = self.inspector.read_resident_kb(pid)
        except ProcessUnavailableError as e:
            logger.debug(f"Skipping {name} ({pid}) this tick: {e.reason}")
            return None

        return Sample(
            timestamp=timestamp,
            pid=pid,
            name=name,
            heap_used_mb=kb_to_mb(counters["EU"] + counters["OU"]),
            heap_capacity_mb=kb_to_mb(counters["EC"] + counters["OC"]),
            rss_mb=kb_to_mb(rss_kb),
        )

    def sample_once(self, elapsed_seconds: float) -> List[Sample]:
        """Run discovery and reads for one tick and return the samples."""
        timestamp = format_elapsed(elapsed_seconds)
        samples: List[Sample] = []
        for process in self.inspector.list_processes():
            if process.name not in self.watched_names:
                continue
            sample = self.sample_process(process.pid, process.name, timestamp)
            if sample is not None:
                samples.append(sample)
        return samples

    def append_samples(self, samples: List[Sample]) -> None:
        if not samples:
            return
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write("".join(f"{sample.to_log_line()}\n" for sample in samples))
            f.flush()

    def tick(self) -> List[Sample]:
        """Sample once at the current elapsed time and persist the result."""
        if self._start_time is None:
            self._start_time = self.clock()
        samples = self.sample_once(self.clock() - self._start_time)
        self.append_samples(samples)
        self.ticks_completed += 1
        return samples

    def run(self) -> None:
        """
        Loop until `stop_event` is set.

        The wait between ticks returns early on stop, so shutdown takes at
        most the duration of one in-flight tick.
        """
        self._start_time = self.clock()
        logger.info(
            f"Sampling {sorted(self.watched_names)} every {self.interval_seconds}s"
        )
        while not self.stop_event.is_set():
            samples = self.tick()
            logger.debug(f"Tick {self.ticks_completed}: {len(samples)} samples")
            self.stop_event.wait(self.interval_seconds)
        logger.info(f"Sampler stopped after {self.ticks_completed} ticks")

    def request_stop(self) -> None:
        self.stop_event.set()


def write_pid_file(pid_file: Path, pid: Optional[int] = None) -> int:
    """Write the sampler's PID so the cleanup step can find it."""
    pid = os.getpid() if pid is None else pid
    pid_file.parent.mkdir(parents=True, exist_ok=True)
    pid_file.write_text(f"{pid}\n", encoding="utf-8")
    return pid


def run_sampler(
    config: MonitorConfig,
    inspector: AbstractProcessInspector,
    interval_seconds: Optional[float] = None,
) -> MemorySampler:
    """
    Entry point of the detached sampler process.

    Writes the PID file, starts a fresh log, and samples until SIGTERM or
    SIGINT.
    """
    interval = interval_seconds or config.collection.interval_seconds
    pid = write_pid_file(config.paths.pid_file)
    logger.info(f"Sampler running with PID {pid}")

    sampler = MemorySampler(
        inspector=inspector,
        log_path=config.paths.log_file,
        interval_seconds=interval,
        watched_names=config.collection.watched_processes,
    )
    sampler.start_log()
    with SignalHandler(sampler.stop_event):
        sampler.run()
    return sampler
