"""
Calendar view model: which days and hours the grid shows for an anchor date and zoom level,
and how navigation moves the anchor.

compact = 3 days centred on the anchor, normal = the anchor's week, wide = two weeks from the
anchor's week start. Week start comes from CALENDAR_WEEK_START (0 = Monday).
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from groupcal.core.calendar_config import CalendarConfig, get_calendar_config
from groupcal.core.constants import (
    GRANULARITY_FINE,
    GRANULARITY_HOUR,
    ZOOM_COMPACT,
    ZOOM_NORMAL,
    ZOOM_STEP_DAYS,
    ZOOM_WIDE,
)
from groupcal.core.date_range import DateRange
from groupcal.core.errors import InvalidRangeError

NAV_FORWARD = "forward"
NAV_BACKWARD = "backward"
NAV_TODAY = "today"


@dataclass(frozen=True)
class CalendarView:
    anchor: date
    zoom: str
    granularity: str
    date_range: DateRange
    hour_grid: tuple[float, ...]

    @property
    def range_key(self) -> str:
        return self.date_range.key


def week_start_for(day: date, week_start: int = 0) -> date:
    return day - timedelta(days=(day.weekday() - week_start) % 7)


def date_range_for(anchor: date, zoom: str, week_start: int = 0) -> DateRange:
    if zoom == ZOOM_COMPACT:
        return DateRange(anchor - timedelta(days=1), anchor + timedelta(days=1))
    if zoom == ZOOM_NORMAL:
        start = week_start_for(anchor, week_start)
        return DateRange(start, start + timedelta(days=6))
    if zoom == ZOOM_WIDE:
        start = week_start_for(anchor, week_start)
        return DateRange(start, start + timedelta(days=13))
    raise InvalidRangeError(f"Unknown zoom level: {zoom!r}")


def hour_grid(start_hour: int, end_hour: int, granularity: str = GRANULARITY_HOUR) -> tuple[float, ...]:
    """
    Displayed hours from start_hour to end_hour inclusive. "fine" adds the half hours,
    including end_hour + 0.5, so both granularities cover the same span.
    """
    if isinstance(start_hour, bool) or isinstance(end_hour, bool):
        raise InvalidRangeError("Hour grid bounds must be integers")
    if not (0 <= start_hour <= end_hour <= 23):
        raise InvalidRangeError(f"Hour grid {start_hour}-{end_hour} is outside 0-24")
    if granularity == GRANULARITY_HOUR:
        return tuple(float(h) for h in range(start_hour, end_hour + 1))
    if granularity == GRANULARITY_FINE:
        return tuple(h / 2 for h in range(start_hour * 2, end_hour * 2 + 2))
    raise InvalidRangeError(f"Unknown granularity: {granularity!r}")


def build_view(
    anchor: date,
    zoom: str = ZOOM_NORMAL,
    granularity: str = GRANULARITY_HOUR,
    *,
    config: CalendarConfig | None = None,
) -> CalendarView:
    """Date range and hour grid for one navigation state. Raises InvalidRangeError before any fetch."""
    cfg = config or get_calendar_config()
    return CalendarView(
        anchor=anchor,
        zoom=zoom,
        granularity=granularity,
        date_range=date_range_for(anchor, zoom, cfg.week_start),
        hour_grid=hour_grid(cfg.day_start_hour, cfg.day_end_hour, granularity),
    )


def max_future_anchor(today: date, max_future_weeks: int) -> date:
    return today + timedelta(weeks=max_future_weeks)


def navigate(
    anchor: date,
    zoom: str,
    direction: str,
    *,
    today: date,
    max_future_weeks: int,
) -> date:
    """
    New anchor after one navigation step. Moving forward past today + max_future_weeks
    leaves the anchor where it is (no error). Backward is unbounded.
    """
    if zoom not in ZOOM_STEP_DAYS:
        raise InvalidRangeError(f"Unknown zoom level: {zoom!r}")
    step = timedelta(days=ZOOM_STEP_DAYS[zoom])
    if direction == NAV_TODAY:
        return today
    if direction == NAV_BACKWARD:
        return anchor - step
    if direction == NAV_FORWARD:
        candidate = anchor + step
        if candidate > max_future_anchor(today, max_future_weeks):
            return anchor
        return candidate
    raise InvalidRangeError(f"Unknown navigation direction: {direction!r}")
