"""
Exception types and error handling helpers.

This module provides the error handling used across the application: severity
aware logging with optional re-raising, and the domain exceptions raised by
the sampler and the supervisor.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.DEBUG: logging.DEBUG,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}
_TRACEBACK_SEVERITIES = frozenset({ErrorSeverity.DEBUG, ErrorSeverity.CRITICAL})


class ValidationError(Exception):
    """
    Exception raised when validation fails.

    This is the main exception type used by configuration and argument
    validation.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ProcessUnavailableError(Exception):
    """
    Raised when a watched process cannot be read on a given tick.

    The process may have exited, access may have been denied, or the JVM tools
    may not have produced output in time. Callers treat this as a transient
    miss and skip the process for that tick.
    """

    def __init__(self, pid: int, reason: str):
        super().__init__(f"Process {pid} unavailable: {reason}")
        self.pid = pid
        self.reason = reason


class MonitorStartupError(Exception):
    """
    Raised when the background sampler fails to come up.

    Attributes:
        startup_log: Whatever the sampler wrote before failing, if anything.
    """

    def __init__(self, message: str, startup_log: str = ""):
        super().__init__(message)
        self.startup_log = startup_log


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log `error` at the level matching `severity`, then optionally re-raise it.

    Debug and critical entries carry the traceback.

    Args:
        error: The exception that occurred
        context: Where the error occurred, e.g. "config parsing"
        severity: An ErrorSeverity or its string value
        reraise: Whether to re-raise the exception after logging
        logger: Logger to write to (defaults to this module's logger)
    """
    severity = ErrorSeverity(severity.lower()) if isinstance(severity, str) else severity
    effective_logger = logger or globals()["logger"]
    effective_logger.log(
        _LOG_LEVELS[severity],
        f"Error in {context}: {type(error).__name__}: {error}",
        exc_info=severity in _TRACEBACK_SEVERITIES,
    )

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_file_error(error: Exception, context: str, **kwargs) -> None:
    """Handle file-related errors."""
    handle_error(error, f"file {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Log a CLI-level error and exit the process."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR)
    if include_traceback:
        severity = ErrorSeverity.CRITICAL
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
