"""
System interaction utilities.
"""

from .commands import check_jdk_tools_installed, run_command

__all__ = [
    "check_jdk_tools_installed",
    "run_command",
]
