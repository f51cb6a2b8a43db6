"""
Process inspector for JVM build daemons using the JDK tools and psutil.

Discovery uses `jps`, which reports each JVM by its main-class name (for
example `GradleDaemon`), something the OS process table does not expose
directly. Generation counters come from `jstat -gc`; resident memory comes
from psutil.
"""

import logging
from typing import Dict, List, Optional

import psutil

from ..system.commands import run_command
from ..validation import ProcessUnavailableError
from .base import AbstractProcessInspector, ProcessInfo

logger = logging.getLogger(__name__)

# Columns of `jstat -gc` needed for the heap figures (all in KB).
REQUIRED_GC_COLUMNS = ("EC", "EU", "OC", "OU")


def parse_jps_output(output: str) -> List[ProcessInfo]:
    """
    Parse `jps` output into ProcessInfo rows.

    Each line is `<pid> <main class>`; the name may be missing when the JVM
    does not expose it. Lines without a numeric pid are skipped.
    """
    processes: List[ProcessInfo] = []
    for line in output.splitlines():
        parts = line.strip().split(maxsplit=1)
        if not parts:
            continue
        try:
            pid = int(parts[0])
        except ValueError:
            logger.debug(f"Skipping unparseable jps line: {line!r}")
            continue
        name = parts[1].strip() if len(parts) > 1 else ""
        processes.append(ProcessInfo(pid=pid, name=name))
    return processes


def parse_jstat_gc_output(output: str) -> Optional[Dict[str, float]]:
    """
    Parse `jstat -gc` output into a column -> value mapping.

    The first non-blank line holds the column names and the last one the
    values. Non-numeric cells (jstat prints `-` for unsupported counters)
    are left out. Returns None when the output has no data row.
    """
    lines = [line for line in output.splitlines() if line.strip()]
    if len(lines) < 2:
        return None

    header = lines[0].split()
    values = lines[-1].split()
    counters: Dict[str, float] = {}
    for column, raw in zip(header, values):
        try:
            counters[column] = float(raw)
        except ValueError:
            continue
    return counters


class JvmProcessInspector(AbstractProcessInspector):
    """
    Reads JVM processes through `jps`/`jstat` and psutil.

    Attributes:
        jps_command: argv used for discovery.
        jstat_command: argv prefix used to read GC counters; the pid is appended.
        command_timeout: Seconds allowed for each JDK tool invocation.
    """

    def __init__(self, jps_command: str = "jps", jstat_command: str = "jstat",
                 command_timeout: float = 10.0):
        self.jps_command = [jps_command]
        self.jstat_command = [jstat_command, "-gc"]
        self.command_timeout = command_timeout

    def list_processes(self) -> List[ProcessInfo]:
        returncode, stdout, stderr = run_command(self.jps_command, timeout=self.command_timeout)
        if returncode != 0:
            logger.warning(f"jps failed with code {returncode}: {stderr.strip()}")
            return []
        return parse_jps_output(stdout)

    def read_gc_counters(self, pid: int) -> Dict[str, float]:
        returncode, stdout, stderr = run_command(
            self.jstat_command + [str(pid)], timeout=self.command_timeout
        )
        if returncode != 0:
            raise ProcessUnavailableError(pid, f"jstat exited with {returncode}: {stderr.strip()}")

        counters = parse_jstat_gc_output(stdout)
        if counters is None:
            raise ProcessUnavailableError(pid, "jstat produced no data row")

        missing = [column for column in REQUIRED_GC_COLUMNS if column not in counters]
        if missing:
            raise ProcessUnavailableError(pid, f"jstat output lacks columns {missing}")
        return counters

    def read_resident_kb(self, pid: int) -> float:
        try:
            return psutil.Process(pid).memory_info().rss / 1024
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as e:
            raise ProcessUnavailableError(pid, type(e).__name__) from e
