"""
Pytest configuration and shared fixtures for the daemonwatch test suite.

This module provides common fixtures, fake process inspectors and sample
logs shared by all test modules.
"""

import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from daemonwatch.collectors.base import AbstractProcessInspector, ProcessInfo  # noqa: E402
from daemonwatch.models.config import (  # noqa: E402
    CollectionConfig,
    LifecycleConfig,
    MonitorConfig,
    PathsConfig,
    ReportConfig,
)
from daemonwatch.validation import ProcessUnavailableError  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Log Fixtures
# ============================================================================

LOG_HEADER = (
    "Starting memory monitor at Mon Jan  1 00:00:00 UTC 2024\n"
    "Elapsed_Time | PID | Name | Heap_Used_MB | Heap_Capacity_MB | RSS_MB\n"
)


@pytest.fixture
def log_header() -> str:
    return LOG_HEADER


@pytest.fixture
def two_process_log_text() -> str:
    """
    101-GradleDaemon at 100, 150, 200 MB and 202-KotlinCompileDaemon at
    50, 50 MB; the second process is gone by the third timestamp.
    """
    return LOG_HEADER + (
        "00:00:00 | 101 | GradleDaemon | 40.0MB | 64.0MB | 100.0MB\n"
        "00:00:00 | 202 | KotlinCompileDaemon | 20.0MB | 32.0MB | 50.0MB\n"
        "00:00:05 | 101 | GradleDaemon | 60.0MB | 64.0MB | 150.0MB\n"
        "00:00:05 | 202 | KotlinCompileDaemon | 21.0MB | 32.0MB | 50.0MB\n"
        "00:00:10 | 101 | GradleDaemon | 80.0MB | 128.0MB | 200.0MB\n"
    )


@pytest.fixture
def write_log(tmp_path: Path) -> Callable[[str], Path]:
    """Factory writing log text to a file in tmp_path."""

    def _write(text: str, name: str = "build_process_watcher.log") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def monitor_config(tmp_path: Path) -> MonitorConfig:
    """A MonitorConfig whose files all live in tmp_path."""
    return MonitorConfig(
        collection=CollectionConfig(interval_seconds=0.1),
        paths=PathsConfig(
            log_file=tmp_path / "build_process_watcher.log",
            pid_file=tmp_path / "monitor.pid",
            chart_file=tmp_path / "memory_usage.svg",
            startup_log_file=tmp_path / "java_mem_monitor.log",
        ),
        lifecycle=LifecycleConfig(startup_grace_seconds=0.5, stop_timeout_seconds=0.5),
        report=ReportConfig(artifact_dir=tmp_path / "artifacts"),
    )


@pytest.fixture
def sample_config_data() -> Dict:
    """Raw `[monitor]` table as it would appear in config.toml."""
    return {
        "collection": {
            "interval_seconds": 2,
            "watched_processes": ["GradleDaemon", "KotlinCompileDaemon"],
        },
        "paths": {
            "log_file": "mem.log",
            "pid_file": "mem.pid",
            "chart_file": "mem.svg",
        },
        "lifecycle": {
            "startup_grace_seconds": 3.0,
            "stop_timeout_seconds": 4.0,
        },
        "report": {
            "artifact_dir": "out",
            "summary_env_var": "STEP_SUMMARY",
        },
    }


@pytest.fixture
def config_file(tmp_path: Path, sample_config_data) -> Path:
    """Write sample_config_data to a temporary config.toml."""
    import toml

    path = tmp_path / "config.toml"
    with open(path, "w") as f:
        toml.dump({"monitor": sample_config_data}, f)
    return path


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    original_config_path = Path(__file__).parent.parent / "conf" / "config.toml"

    yield

    from daemonwatch.config import clear_config_cache, set_config_path

    clear_config_cache()
    set_config_path(original_config_path)


# ============================================================================
# Fake Process Inspector
# ============================================================================


class FakeInspector(AbstractProcessInspector):
    """
    In-memory process inspector.

    Attributes:
        processes: Returned by list_processes.
        counters: GC counters by pid; a missing pid raises ProcessUnavailableError.
        rss_kb: Resident KB by pid; a missing pid raises ProcessUnavailableError.
    """

    def __init__(
        self,
        processes: Optional[List[ProcessInfo]] = None,
        counters: Optional[Dict[int, Dict[str, float]]] = None,
        rss_kb: Optional[Dict[int, float]] = None,
    ):
        self.processes = processes or []
        self.counters = counters or {}
        self.rss_kb = rss_kb or {}
        self.list_calls = 0

    def list_processes(self) -> List[ProcessInfo]:
        self.list_calls += 1
        return list(self.processes)

    def read_gc_counters(self, pid: int) -> Dict[str, float]:
        if pid not in self.counters:
            raise ProcessUnavailableError(pid, "no counters")
        return self.counters[pid]

    def read_resident_kb(self, pid: int) -> float:
        if pid not in self.rss_kb:
            raise ProcessUnavailableError(pid, "no rss")
        return self.rss_kb[pid]


@pytest.fixture
def fake_inspector() -> FakeInspector:
    """Two watched daemons and one unrelated JVM, all readable."""
    return FakeInspector(
        processes=[
            ProcessInfo(101, "GradleDaemon"),
            ProcessInfo(202, "KotlinCompileDaemon"),
            ProcessInfo(303, "Jps"),
        ],
        counters={
            101: {"EC": 40960.0, "EU": 10240.0, "OC": 81920.0, "OU": 30720.0},
            202: {"EC": 20480.0, "EU": 5120.0, "OC": 40960.0, "OU": 15360.0},
            303: {"EC": 1024.0, "EU": 512.0, "OC": 1024.0, "OU": 512.0},
        },
        rss_kb={101: 512000.0, 202: 256000.0, 303: 10240.0},
    )
