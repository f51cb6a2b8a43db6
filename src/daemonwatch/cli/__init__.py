"""
Command-line interface for the daemonwatch package.

This module provides the main CLI entry point for the monitoring application.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
