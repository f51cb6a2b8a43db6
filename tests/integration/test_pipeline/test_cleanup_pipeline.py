"""
Integration tests for the end-of-job cleanup pipeline.

Tests the complete workflow from a sampler log on disk through rendering,
artifact publishing and the build summary. The SVG export is replaced by a
stub that writes a placeholder file so the tests do not need Kaleido's
browser.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import kaleido
import plotly.graph_objects as go
import pytest

from daemonwatch.orchestration.cleanup import run_cleanup
from daemonwatch.orchestration.supervisor import SamplerSupervisor
from daemonwatch.sampling.sampler import MemorySampler


def _fake_write_image(fig, path, **kwargs):
    Path(path).write_text("<svg/>")


@pytest.fixture
def stub_svg_export():
    with patch.object(go.Figure, "write_image", autospec=True, side_effect=_fake_write_image):
        yield


@pytest.fixture
def idle_supervisor():
    supervisor = MagicMock(spec=SamplerSupervisor)
    supervisor.stop_from_pid_file.return_value = False
    return supervisor


@pytest.mark.integration
class TestCleanupPipeline:
    """Integration tests for run_cleanup."""

    def test_full_run(self, monitor_config, two_process_log_text, idle_supervisor,
                      stub_svg_export, tmp_path):
        monitor_config.paths.log_file.write_text(two_process_log_text)
        summary = tmp_path / "step_summary.md"
        summary.write_text("# Earlier step\n")
        environ = {"GITHUB_JOB": "assemble", "GITHUB_STEP_SUMMARY": str(summary)}

        result = run_cleanup(monitor_config, supervisor=idle_supervisor, environ=environ)

        idle_supervisor.stop_from_pid_file.assert_called_once()
        assert result.statistics.series_count == 2
        assert "Agg_0 --> Agg_1" in result.diagram_text

        chart = monitor_config.paths.chart_file
        assert result.chart_files == [chart, chart.with_suffix(".html")]
        assert chart.exists()

        destination = monitor_config.report.artifact_dir / "build_process_watcher-assemble"
        assert sorted(path.name for path in result.published_files) == [
            "build_process_watcher.log",
            "memory_usage.html",
            "memory_usage.svg",
        ]
        assert (destination / "build_process_watcher.log").read_text() == two_process_log_text

        content = summary.read_text()
        assert content.startswith("# Earlier step\n")
        assert "## Build Process Analysis" in content
        assert "```mermaid" in content
        assert "- Maximum RSS observed: 200.00 MB" in content
        assert "> Note: A detailed SVG graph and log file are available" in content
        assert result.summary_path == summary

    def test_run_without_log_or_summary(self, monitor_config, idle_supervisor, stub_svg_export):
        result = run_cleanup(monitor_config, supervisor=idle_supervisor, environ={})

        assert not result.statistics.has_data
        assert result.summary_path is None
        assert "- Maximum RSS observed: No data" in result.summary_text
        assert "flowchart LR" in result.diagram_text
        assert monitor_config.paths.chart_file.exists()
        assert "build_process_watcher.log" not in [p.name for p in result.published_files]

    def test_summary_failure_keeps_renders(self, monitor_config, two_process_log_text,
                                           idle_supervisor, stub_svg_export, tmp_path):
        monitor_config.paths.log_file.write_text(two_process_log_text)
        environ = {"GITHUB_STEP_SUMMARY": str(tmp_path)}

        result = run_cleanup(monitor_config, supervisor=idle_supervisor, environ=environ)

        assert result.summary_path is None
        assert monitor_config.paths.chart_file.exists()
        assert len(result.published_files) == 3

    def test_svg_export_failure_falls_back_to_html(self, monitor_config, two_process_log_text,
                                                   idle_supervisor, tmp_path):
        monitor_config.paths.log_file.write_text(two_process_log_text)
        summary = tmp_path / "step_summary.md"
        environ = {"GITHUB_STEP_SUMMARY": str(summary)}

        with patch.object(go.Figure, "write_image", side_effect=RuntimeError("no browser")), \
                patch.object(kaleido, "get_chrome_sync", side_effect=OSError("offline")):
            result = run_cleanup(monitor_config, supervisor=idle_supervisor, environ=environ)

        assert result.chart_files == [monitor_config.paths.chart_file.with_suffix(".html")]
        assert not monitor_config.paths.chart_file.exists()
        content = summary.read_text()
        assert "SVG" not in content
        assert "> Note: An interactive HTML graph and log file are available" in content

    def test_sampler_log_feeds_cleanup(self, monitor_config, fake_inspector, idle_supervisor,
                                       stub_svg_export):
        sampler = MemorySampler(
            fake_inspector,
            monitor_config.paths.log_file,
            watched_names=monitor_config.collection.watched_processes,
        )
        sampler.start_log()
        sampler.append_samples(sampler.sample_once(0))
        sampler.append_samples(sampler.sample_once(5))

        result = run_cleanup(monitor_config, supervisor=idle_supervisor, environ={})

        assert result.parsed.timeline == ("00:00:00", "00:00:05")
        assert [entry.label for entry in result.statistics.per_series] == [
            "101-GradleDaemon",
            "202-KotlinCompileDaemon",
        ]
        assert result.statistics.max_rss_mb == 500.0
