"""
Unit tests for the memory chart.

Tests the derived scale (axis top, gridlines, label thinning), the trace
layout of the Plotly figure, and saving with and without a working SVG
exporter.
"""

from unittest.mock import patch

import kaleido
import plotly.graph_objects as go
import pytest

from daemonwatch.analysis.log_parser import build_parsed_log, parse_log_text
from daemonwatch.models.samples import ParsedLog, Sample
from daemonwatch.rendering.chart import (
    AGGREGATE_COLOR,
    AGGREGATE_NAME,
    SERIES_PALETTE,
    build_chart,
    compute_chart_layout,
    gridline_values,
    save_chart,
    series_color,
    x_label_stride,
    y_axis_max,
)


def _single_series(values):
    return build_parsed_log(
        [Sample(f"00:00:{i:02d}", 1, "A", 1.0, 1.0, value) for i, value in enumerate(values)]
    )


@pytest.mark.unit
class TestChartScale:
    """Test cases for the chart's derived scale."""

    @pytest.mark.parametrize(
        "peak, expected",
        [(0.0, 1000), (1.0, 1000), (999.9, 1000), (1000.0, 1000), (2300.0, 3000), (3000.0, 3000)],
    )
    def test_y_axis_max(self, peak, expected):
        assert y_axis_max(peak) == expected

    def test_gridlines_every_500(self):
        assert gridline_values(3000) == [0, 500, 1000, 1500, 2000, 2500, 3000]

    def test_x_label_stride(self):
        assert x_label_stride(0) == 1
        assert x_label_stride(10) == 1
        assert x_label_stride(100) == 7

    def test_palette_cycles(self):
        assert series_color(0) == SERIES_PALETTE[0]
        assert series_color(len(SERIES_PALETTE)) == SERIES_PALETTE[0]

    def test_layout_uses_aggregate_peak(self):
        parsed = build_parsed_log(
            [
                Sample("00:00:00", 1, "A", 1.0, 1.0, 1200.0),
                Sample("00:00:00", 2, "B", 1.0, 1.0, 1100.0),
            ]
        )

        layout = compute_chart_layout(parsed)

        assert layout.aggregate == [2300.0]
        assert layout.y_axis_max == 3000
        assert layout.gridlines[-1] == 3000

    def test_single_timestamp_has_unit_span(self):
        layout = compute_chart_layout(_single_series([10.0]))

        assert layout.x_span == 1
        assert layout.label_indices == [0]

    def test_empty_log(self):
        layout = compute_chart_layout(ParsedLog.empty())

        assert layout.y_axis_max == 1000
        assert layout.aggregate == []
        assert layout.label_indices == []


@pytest.mark.unit
class TestBuildChart:
    """Test cases for the Plotly figure."""

    def test_one_trace_per_series_then_aggregate(self, two_process_log_text):
        fig = build_chart(parse_log_text(two_process_log_text))

        assert [trace.name for trace in fig.data] == [
            "101-GradleDaemon",
            "202-KotlinCompileDaemon",
            AGGREGATE_NAME,
        ]

    def test_aggregate_trace_is_dashed_and_last(self, two_process_log_text):
        fig = build_chart(parse_log_text(two_process_log_text))

        aggregate = fig.data[-1]
        assert aggregate.line.dash == "dash"
        assert aggregate.line.color == AGGREGATE_COLOR
        assert list(aggregate.y) == [150.0, 200.0, 200.0]

    def test_series_plotted_at_timeline_positions(self, two_process_log_text):
        fig = build_chart(parse_log_text(two_process_log_text))

        kotlin = fig.data[1]
        assert list(kotlin.x) == [0, 1]
        assert list(kotlin.y) == [50.0, 50.0]

    def test_axes(self, two_process_log_text):
        fig = build_chart(parse_log_text(two_process_log_text))

        assert tuple(fig.layout.yaxis.range) == (0, 1000)
        assert fig.layout.yaxis.dtick == 500
        assert fig.layout.yaxis.griddash == "dash"
        assert tuple(fig.layout.xaxis.range) == (0, 2)
        assert tuple(fig.layout.xaxis.ticktext) == ("00:00:00", "00:00:05", "00:00:10")
        assert fig.layout.xaxis.tickangle == 45

    def test_single_timestamp(self):
        fig = build_chart(_single_series([2300.0]))

        assert tuple(fig.layout.xaxis.range) == (0, 1)
        assert tuple(fig.layout.yaxis.range) == (0, 3000)

    def test_empty_log_still_builds(self):
        fig = build_chart(ParsedLog.empty())

        assert len(fig.data) == 1
        assert fig.data[0].name == AGGREGATE_NAME


@pytest.mark.unit
class TestSaveChart:
    """Test cases for writing chart files."""

    def test_svg_and_html_written(self, tmp_path):
        fig = build_chart(_single_series([10.0, 20.0]))
        svg_path = tmp_path / "charts" / "memory_usage.svg"

        with patch.object(go.Figure, "write_image") as mock_write_image:
            written = save_chart(fig, svg_path)

        mock_write_image.assert_called_once()
        assert mock_write_image.call_args.args[0] == svg_path
        assert written == [svg_path, svg_path.with_suffix(".html")]
        assert svg_path.with_suffix(".html").exists()

    def test_svg_failure_still_writes_html(self, tmp_path, caplog):
        fig = build_chart(_single_series([10.0]))
        svg_path = tmp_path / "memory_usage.svg"

        with patch.object(go.Figure, "write_image", side_effect=ValueError("no chrome")), \
                patch.object(kaleido, "get_chrome_sync", side_effect=OSError("offline")):
            written = save_chart(fig, svg_path)

        assert written == [svg_path.with_suffix(".html")]
        assert not svg_path.exists()
        assert "Failed to save static chart" in caplog.text

    def test_missing_chrome_is_fetched_and_export_retried(self, tmp_path):
        fig = build_chart(_single_series([10.0]))
        svg_path = tmp_path / "memory_usage.svg"

        with patch.object(go.Figure, "write_image",
                          side_effect=[RuntimeError("Kaleido requires Google Chrome"), None]) as mock_write_image, \
                patch.object(kaleido, "get_chrome_sync", return_value=tmp_path / "chrome") as mock_get_chrome:
            written = save_chart(fig, svg_path)

        mock_get_chrome.assert_called_once_with()
        assert mock_write_image.call_count == 2
        assert written == [svg_path, svg_path.with_suffix(".html")]

    def test_working_export_does_not_fetch_chrome(self, tmp_path):
        fig = build_chart(_single_series([10.0]))

        with patch.object(go.Figure, "write_image"), \
                patch.object(kaleido, "get_chrome_sync") as mock_get_chrome:
            save_chart(fig, tmp_path / "memory_usage.svg")

        mock_get_chrome.assert_not_called()
