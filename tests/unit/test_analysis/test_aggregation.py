"""
Unit tests for aggregation and diagram downsampling.
"""

import pytest

from daemonwatch.analysis.aggregation import (
    aggregate_at,
    aggregate_series,
    downsample_indices,
    downsample_stride,
    downsample_timeline,
    target_point_count,
)
from daemonwatch.analysis.log_parser import parse_log_text


@pytest.mark.unit
class TestAggregation:
    """Test cases for summing series at a timestamp."""

    def test_aggregate_over_timeline(self, two_process_log_text):
        parsed = parse_log_text(two_process_log_text)

        assert aggregate_series(parsed.series, parsed.timeline) == [150.0, 200.0, 200.0]

    def test_missing_series_contributes_nothing(self, two_process_log_text):
        parsed = parse_log_text(two_process_log_text)

        # KotlinCompileDaemon has no sample here; no carry-forward of its last value.
        assert aggregate_at(parsed.series, "00:00:10") == 200.0

    def test_unknown_timestamp_sums_to_zero(self, two_process_log_text):
        parsed = parse_log_text(two_process_log_text)

        total = aggregate_at(parsed.series, "12:00:00")

        assert total == 0.0
        assert isinstance(total, float)

    def test_empty_input(self):
        assert aggregate_series({}, []) == []


@pytest.mark.unit
class TestDownsampling:
    """Test cases for timeline thinning."""

    @pytest.mark.parametrize(
        "n, target, stride",
        [
            (1, 1, 1),
            (10, 10, 1),
            (29, 29, 1),
            (30, 20, 2),
            (50, 20, 3),
            (99, 20, 5),
            (100, 30, 4),
            (500, 30, 17),
        ],
    )
    def test_target_and_stride(self, n, target, stride):
        assert target_point_count(n) == target
        assert downsample_stride(n) == stride

    def test_empty_timeline(self):
        assert downsample_stride(0) == 1
        assert downsample_indices(0) == []
        assert downsample_timeline([]) == []

    def test_medium_run_indices(self):
        indices = downsample_indices(50)

        assert indices[0] == 0
        assert indices[-1] == 48
        assert len(indices) == 17

    def test_first_is_always_kept_and_last_only_on_stride(self):
        timeline = [f"00:00:{i:02d}" for i in range(50)]

        sampled = downsample_timeline(timeline)

        assert sampled[0] == timeline[0]
        assert timeline[-1] not in sampled

    def test_short_run_keeps_every_point(self):
        timeline = ["00:00:00", "00:00:05", "00:00:10"]

        assert downsample_timeline(timeline) == timeline
