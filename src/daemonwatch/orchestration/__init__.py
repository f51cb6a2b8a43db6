"""
Orchestration of the sampler lifecycle and the end-of-job pipeline.

- signal_handler: stop signals -> sampler stop event
- supervisor: spawning, checking and stopping the detached sampler
- cleanup: stop, parse, render, publish, summarize
"""

from .signal_handler import SignalHandler
from .supervisor import SamplerHandle, SamplerSupervisor, read_pid_file

__all__ = [
    "SignalHandler",
    "SamplerHandle",
    "SamplerSupervisor",
    "read_pid_file",
]
