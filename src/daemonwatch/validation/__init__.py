"""
Validation and error handling for the daemonwatch package.

This module provides input validation and error handling with consistent
error reporting across the application.
"""

from .exceptions import (
    ErrorSeverity,
    MonitorStartupError,
    ProcessUnavailableError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
    handle_file_error,
)
from .validators import (
    validate_name_list,
    validate_non_empty_string,
    validate_positive_float,
)

__all__ = [
    "ErrorSeverity",
    "MonitorStartupError",
    "ProcessUnavailableError",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "handle_file_error",
    "validate_name_list",
    "validate_non_empty_string",
    "validate_positive_float",
]
