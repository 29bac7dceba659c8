"""
Tests for percentage projection, display scales and axis markers.
"""
import pytest

from intervals import CutoffRange, Interval
from timeline_projector import (
    TimelineScale,
    display_scale,
    project,
    project_segments,
    time_markers,
)


class TestProject:
    def test_percent_positions(self):
        segments = project([Interval(25, 50, "x")], [], TimelineScale(offset=0, total_duration=100))
        assert len(segments) == 1
        assert segments[0].left == pytest.approx(25.0)
        assert segments[0].width == pytest.approx(25.0)
        assert segments[0].payload == "x"
        assert segments[0].index == 0

    def test_offset_shifts_left(self):
        segments = project([Interval(480, 540)], [], TimelineScale(offset=480, total_duration=120))
        assert segments[0].left == pytest.approx(0.0)
        assert segments[0].width == pytest.approx(50.0)

    def test_cutoff_splits_into_indexed_pieces(self):
        segments = project([Interval(0, 100, "run")], [CutoffRange(40, 60)], TimelineScale(0, 100))
        assert [(s.left, s.width) for s in segments] == [pytest.approx((0.0, 40.0)), pytest.approx((60.0, 40.0))]
        assert [s.index for s in segments] == [0, 1]
        assert [(s.start, s.end) for s in segments] == [(0, 40), (60, 100)]

    def test_fully_cut_interval_has_no_segments(self):
        assert project([Interval(40, 60)], [CutoffRange(0, 100)], TimelineScale(0, 100)) == []

    def test_left_may_be_negative_or_past_100(self):
        segments = project([Interval(-10, 5), Interval(90, 120)], [], TimelineScale(0, 100))
        assert segments[0].left == pytest.approx(-10.0)
        assert segments[1].left + segments[1].width == pytest.approx(120.0)

    def test_zero_length_interval_gives_zero_width(self):
        segments = project([Interval(30, 30)], [], TimelineScale(0, 60))
        assert len(segments) == 1
        assert segments[0].width == 0.0

    def test_width_is_never_negative(self):
        segments = project([Interval(50, 20)], [], TimelineScale(0, 100))
        assert segments[0].width == 0.0

    @pytest.mark.parametrize("duration", [0, -5, float("nan"), float("inf")])
    def test_invalid_scale_raises_when_strict(self, duration):
        with pytest.raises(ValueError):
            project([Interval(0, 10)], [], TimelineScale(0, duration), strict=True)

    def test_invalid_scale_degrades_when_lenient(self, caplog):
        segments = project([Interval(0, 10), Interval(20, 30)], [], TimelineScale(0, 0), strict=False)
        assert [(s.left, s.width) for s in segments] == [(0.0, 0.0), (0.0, 0.0)]
        assert "Invalid timeline scale" in caplog.text

    def test_strict_default_comes_from_config(self, strict_contracts):
        with pytest.raises(ValueError):
            project([Interval(0, 10)], [], TimelineScale(0, 0))

    def test_lenient_default_comes_from_config(self, lenient_contracts):
        assert project([Interval(0, 10)], [], TimelineScale(0, 0))[0].width == 0.0


def test_project_segments_does_not_slice_again():
    pieces = [Interval(0, 40, "a"), Interval(60, 100, "a")]
    segments = project_segments(pieces, TimelineScale(0, 200))
    assert [(s.left, s.width, s.index) for s in segments] == [
        pytest.approx((0.0, 20.0, 0)),
        pytest.approx((30.0, 20.0, 1)),
    ]


def test_scale_to_percent():
    scale = TimelineScale(offset=60, total_duration=120)
    assert scale.to_percent(120) == pytest.approx(50.0)
    assert TimelineScale(0, 0).to_percent(10) == 0.0


class TestDisplayScale:
    def test_head_extent(self):
        scale = display_scale(0, 100)
        assert scale == TimelineScale(offset=0, total_duration=100)

    def test_widened_for_overflowing_channel(self):
        scale = display_scale(480, 600, [[Interval(480, 540)], [Interval(570, 630)]])
        assert scale.offset == 480
        assert scale.total_duration == 150

    def test_never_narrower_than_head(self):
        assert display_scale(0, 100, [[Interval(10, 20)]]).total_duration == 100

    def test_minimum_duration(self):
        assert display_scale(30, 30, min_minutes=5).total_duration == 5
        assert display_scale(30, 10).total_duration == 1


class TestTimeMarkers:
    def test_one_hour_uses_ten_minute_steps(self):
        markers = time_markers(60)
        assert [m.minutes for m in markers] == [0, 10, 20, 30, 40, 50, 60]
        assert markers[-1].position == pytest.approx(100.0)

    def test_just_over_two_hours_adds_final_marker(self):
        markers = time_markers(130)
        assert [m.minutes for m in markers] == [0, 30, 60, 90, 120, 130]
        assert markers[-1].position == 100.0

    @pytest.mark.parametrize("duration,last", [
        (64, 60),   # tail 4 <= 0.3 * 15
        (65, 65),   # tail 5 > 4.5
        (42, 40),
        (45, 45),
    ])
    def test_final_marker_threshold(self, duration, last):
        assert time_markers(duration)[-1].minutes == last

    def test_step_for_ninety_minutes(self):
        assert [m.minutes for m in time_markers(90)] == [0, 15, 30, 45, 60, 75, 90]

    @pytest.mark.parametrize("duration", [0, -10, float("nan")])
    def test_no_markers_for_empty_duration(self, duration):
        assert time_markers(duration) == []

    def test_positions_are_percentages(self):
        for marker in time_markers(40):
            assert marker.position == pytest.approx(marker.minutes / 40 * 100)
