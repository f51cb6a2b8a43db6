"""
Unit tests for error handling helpers and domain exceptions.
"""

import logging

import pytest

from daemonwatch.validation import (
    ErrorSeverity,
    MonitorStartupError,
    ProcessUnavailableError,
    ValidationError,
    handle_cli_error,
    handle_error,
    handle_file_error,
)

TEST_LOGGER = logging.getLogger("daemonwatch.tests.errors")


@pytest.mark.unit
class TestHandleError:
    """Test cases for handle_error and its wrappers."""

    def test_reraises_by_default(self):
        with pytest.raises(ValueError):
            handle_error(ValueError("bad"), "parsing", logger=TEST_LOGGER)

    @pytest.mark.parametrize(
        "severity, level",
        [
            (ErrorSeverity.INFO, logging.INFO),
            (ErrorSeverity.WARNING, logging.WARNING),
            (ErrorSeverity.ERROR, logging.ERROR),
            ("critical", logging.CRITICAL),
        ],
    )
    def test_logs_at_severity(self, caplog, severity, level):
        with caplog.at_level(logging.DEBUG):
            handle_error(OSError("disk full"), "writing", severity=severity,
                         reraise=False, logger=TEST_LOGGER)

        record = caplog.records[-1]
        assert record.levelno == level
        assert record.getMessage() == "Error in writing: OSError: disk full"

    def test_critical_includes_traceback(self, caplog):
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            handle_error(e, "cleanup", severity=ErrorSeverity.CRITICAL,
                         reraise=False, logger=TEST_LOGGER)

        assert caplog.records[-1].exc_info is not None

    def test_file_error_prefix(self, caplog):
        handle_file_error(OSError("nope"), "copying x", severity=ErrorSeverity.WARNING,
                          reraise=False, logger=TEST_LOGGER)

        assert "Error in file copying x" in caplog.text

    def test_cli_error_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_error(ValueError("bad"), "start", exit_code=3, logger=TEST_LOGGER)

        assert exc_info.value.code == 3


@pytest.mark.unit
class TestDomainExceptions:
    """Test cases for the domain exception types."""

    def test_process_unavailable(self):
        error = ProcessUnavailableError(4242, "NoSuchProcess")

        assert error.pid == 4242
        assert error.reason == "NoSuchProcess"
        assert "4242" in str(error)

    def test_startup_error_carries_log(self):
        error = MonitorStartupError("Monitor failed to create PID file", startup_log="trace")

        assert error.startup_log == "trace"
        assert str(error) == "Monitor failed to create PID file"

    def test_validation_error_fields(self):
        error = ValidationError("bad interval", field_name="interval", value=-1)

        assert error.field_name == "interval"
        assert error.value == -1
        assert error.severity == ErrorSeverity.ERROR
