"""
The background sampler that records daemon memory into the log.
"""

from .sampler import (
    MemorySampler,
    format_elapsed,
    kb_to_mb,
    run_sampler,
    write_pid_file,
)

__all__ = [
    "MemorySampler",
    "format_elapsed",
    "kb_to_mb",
    "run_sampler",
    "write_pid_file",
]
