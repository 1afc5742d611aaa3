"""View model: date ranges per zoom, hour grids, navigation clamp."""

from dataclasses import replace
from datetime import date

import pytest

from groupcal.core.calendar_config import get_calendar_config
from groupcal.core.date_range import DateRange
from groupcal.core.errors import InvalidRangeError
from groupcal.services.calendar.view_model import build_view, hour_grid, navigate

WEDNESDAY = date(2024, 6, 12)
TODAY = date(2024, 6, 10)


@pytest.mark.parametrize(
    "zoom,start,end",
    [
        ("compact", date(2024, 6, 11), date(2024, 6, 13)),
        ("normal", date(2024, 6, 10), date(2024, 6, 16)),
        ("wide", date(2024, 6, 10), date(2024, 6, 23)),
    ],
)
def test_range_per_zoom(zoom, start, end):
    view = build_view(WEDNESDAY, zoom)
    assert view.date_range == DateRange(start, end)
    assert view.range_key == f"{start.isoformat()}..{end.isoformat()}"


def test_configurable_week_start():
    config = replace(get_calendar_config(), week_start=6)
    view = build_view(WEDNESDAY, "normal", config=config)
    assert view.date_range == DateRange(date(2024, 6, 9), date(2024, 6, 15))


def test_default_hour_grid():
    view = build_view(WEDNESDAY)
    assert view.hour_grid[0] == 8
    assert view.hour_grid[-1] == 22
    assert len(view.hour_grid) == 15


def test_fine_grid_covers_same_span_in_half_hours():
    grid = hour_grid(8, 22, "fine")
    assert len(grid) == 30
    assert grid[:3] == (8.0, 8.5, 9.0)
    assert grid[-1] == 22.5


@pytest.mark.parametrize("start,end", [(10, 9), (-1, 5), (0, 24), (8, 30)])
def test_hour_grid_out_of_bounds(start, end):
    with pytest.raises(InvalidRangeError):
        hour_grid(start, end)


def test_unknown_zoom_and_granularity_rejected():
    with pytest.raises(InvalidRangeError):
        build_view(WEDNESDAY, "huge")
    with pytest.raises(InvalidRangeError):
        build_view(WEDNESDAY, "normal", "quarter")


def test_range_ending_before_start_rejected():
    with pytest.raises(InvalidRangeError):
        DateRange(date(2024, 6, 12), date(2024, 6, 10))
    with pytest.raises(InvalidRangeError):
        DateRange.parse("2024-06-12", "not-a-date")


@pytest.mark.parametrize("zoom,days", [("compact", 3), ("normal", 7), ("wide", 14)])
def test_navigation_steps(zoom, days):
    forward = navigate(TODAY, zoom, "forward", today=TODAY, max_future_weeks=12)
    backward = navigate(TODAY, zoom, "backward", today=TODAY, max_future_weeks=12)
    assert (forward - TODAY).days == days
    assert (TODAY - backward).days == days


def test_forward_clamped_at_max_future_weeks():
    boundary = date(2024, 9, 2)  # TODAY + 12 weeks
    assert navigate(date(2024, 8, 26), "normal", "forward", today=TODAY, max_future_weeks=12) == boundary
    assert navigate(boundary, "normal", "forward", today=TODAY, max_future_weeks=12) == boundary
    assert navigate(boundary, "normal", "backward", today=TODAY, max_future_weeks=12) == date(2024, 8, 26)


def test_today_resets_anchor():
    assert navigate(date(2024, 8, 1), "wide", "today", today=TODAY, max_future_weeks=12) == TODAY


def test_unknown_direction_rejected():
    with pytest.raises(InvalidRangeError):
        navigate(TODAY, "normal", "sideways", today=TODAY, max_future_weeks=12)
