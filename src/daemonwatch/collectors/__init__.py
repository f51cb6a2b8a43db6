"""
Process inspection for the sampler.

- base: ProcessInfo and the AbstractProcessInspector interface
- jvm_inspector: JVM discovery and counters via jps/jstat, RSS via psutil
"""

from .base import AbstractProcessInspector, ProcessInfo
from .jvm_inspector import (
    REQUIRED_GC_COLUMNS,
    JvmProcessInspector,
    parse_jps_output,
    parse_jstat_gc_output,
)

__all__ = [
    "AbstractProcessInspector",
    "ProcessInfo",
    "JvmProcessInspector",
    "REQUIRED_GC_COLUMNS",
    "parse_jps_output",
    "parse_jstat_gc_output",
]
