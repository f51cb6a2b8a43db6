"""
Defines the base structures and abstract class for process inspectors.

This module provides:
- ProcessInfo: A dataclass naming one live process.
- AbstractProcessInspector: An abstract base class (ABC) that defines the
  interface the sampler uses to discover processes and read their memory.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessInfo:
    """
    A live process as seen by discovery.

    Attributes:
        pid: Process ID.
        name: The name used for watch-list matching (for JVMs, the main class).
    """

    pid: int
    name: str


class AbstractProcessInspector(ABC):
    """
    Abstract base class for process inspectors.

    Implementations list live processes and read GC counters and resident
    memory for one process id. Read methods raise `ProcessUnavailableError`
    when the data cannot be obtained; they never return placeholders.
    """

    @abstractmethod
    def list_processes(self) -> List[ProcessInfo]:
        """
        Returns the processes currently alive.

        Returns:
            A list of ProcessInfo, possibly empty.
        """
        pass

    @abstractmethod
    def read_gc_counters(self, pid: int) -> Dict[str, float]:
        """
        Returns the named garbage-collector counters of a process, in KB.

        Raises:
            ProcessUnavailableError: If the counters cannot be read.
        """
        pass

    @abstractmethod
    def read_resident_kb(self, pid: int) -> float:
        """
        Returns the resident set size of a process in KB.

        Raises:
            ProcessUnavailableError: If the process cannot be read.
        """
        pass
