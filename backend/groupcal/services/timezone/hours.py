"""
Canonical <-> local hour conversion for one viewer.

Offsets between two zones can differ from one date to another around DST transitions,
so every conversion takes a reference date. By default the reference date is the day the
context was created ("today" for the viewer session) and conversions are memoized per
hour. That makes a slot three months out convert with today's offsets: near a DST
boundary the displayed hour can be off by one. This is a known precision trade-off; pass
the slot's own date as reference_date (or build the context with use_slot_date=True)
to convert exactly.

Algorithm: interpret the input hour as wall-clock time on reference_date in the source
zone, render that instant in both zones, and shift the input by the difference of the two
rendered wall clocks. Because both directions measure the same instant the pair is
symmetric: to_canonical_hour(to_local_hour(h, d), d) == h.

The shift is the exact offset difference, not rounded to the hour grid. For zones whose
offset from the canonical zone is not a whole hour (Asia/Kolkata, Australia/Adelaide,
America/St_Johns) an integer local hour lands on a canonical x.5 key, so such viewers only
see slots stored on half hours. Their own writes round-trip; slots written on whole hours
by canonical-zone users do not show on their hourly grid.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from groupcal.core.calendar_config import CalendarConfig, get_calendar_config
from groupcal.services.timezone.resolve import ViewerTimezone, resolve_viewer_timezone

logger = logging.getLogger(__name__)

TO_LOCAL = "to_local"
TO_CANONICAL = "to_canonical"


class HourConversionCache:
    """Memoized conversions owned by one ViewerTimezoneContext. Lives as long as the context."""

    def __init__(self) -> None:
        self._values: dict[tuple[str, date, float], float] = {}
        self.hits = 0
        self.misses = 0

    def get(self, direction: str, reference_date: date, hour: float) -> float | None:
        value = self._values.get((direction, reference_date, hour))
        if value is None:
            self.misses += 1
        else:
            self.hits += 1
        return value

    def put(self, direction: str, reference_date: date, hour: float, value: float) -> None:
        self._values[(direction, reference_date, hour)] = value

    def clear(self) -> None:
        self._values.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._values)


def _wall_clock(day: date, hour: float, zone: ZoneInfo) -> datetime:
    """Aware datetime for `hour` (may be fractional or 24) on `day` in `zone`."""
    naive = datetime.combine(day, time()) + timedelta(hours=hour)
    return naive.replace(tzinfo=zone)


def _hours_between(a: datetime, b: datetime) -> float:
    return (a - b).total_seconds() / 3600.0


class ViewerTimezoneContext:
    """
    Resolved viewer zone plus its conversion cache. Created once per viewer session and
    never mutated; a timezone change means building a new context.
    """

    def __init__(
        self,
        viewer: ViewerTimezone,
        *,
        canonical_timezone: str | None = None,
        reference_date: date | None = None,
        use_slot_date: bool = False,
    ) -> None:
        self.viewer = viewer
        self.canonical_timezone = canonical_timezone or get_calendar_config().canonical_timezone
        self._canonical_zone = ZoneInfo(self.canonical_timezone)
        self._local_zone = ZoneInfo(viewer.name)
        self.reference_date = reference_date or datetime.now(self._local_zone).date()
        self.use_slot_date = use_slot_date
        self.cache = HourConversionCache()

    @classmethod
    def resolve(
        cls,
        name: str | None = None,
        *,
        config: CalendarConfig | None = None,
        reference_date: date | None = None,
    ) -> "ViewerTimezoneContext":
        cfg = config or get_calendar_config()
        return cls(
            resolve_viewer_timezone(name, cfg),
            canonical_timezone=cfg.canonical_timezone,
            reference_date=reference_date,
            use_slot_date=cfg.convert_with_slot_date,
        )

    @property
    def name(self) -> str:
        return self.viewer.name

    @property
    def is_canonical(self) -> bool:
        return self.viewer.is_canonical

    def _offset_delta(self, hour: float, reference_date: date, source: ZoneInfo) -> float:
        """Local wall clock minus canonical wall clock, in hours, at `hour` in `source` zone."""
        instant = _wall_clock(reference_date, hour, source)
        local_wall = instant.astimezone(self._local_zone).replace(tzinfo=None)
        canonical_wall = instant.astimezone(self._canonical_zone).replace(tzinfo=None)
        return _hours_between(local_wall, canonical_wall)

    def to_local_hour(self, canonical_hour: float, reference_date: date | None = None) -> float:
        if self.is_canonical:
            return canonical_hour
        ref = reference_date or self.reference_date
        cached = self.cache.get(TO_LOCAL, ref, canonical_hour)
        if cached is not None:
            return cached
        value = canonical_hour + self._offset_delta(canonical_hour, ref, self._canonical_zone)
        self.cache.put(TO_LOCAL, ref, canonical_hour, value)
        return value

    def to_canonical_hour(self, local_hour: float, reference_date: date | None = None) -> float:
        if self.is_canonical:
            return local_hour
        ref = reference_date or self.reference_date
        cached = self.cache.get(TO_CANONICAL, ref, local_hour)
        if cached is not None:
            return cached
        value = local_hour - self._offset_delta(local_hour, ref, self._local_zone)
        self.cache.put(TO_CANONICAL, ref, local_hour, value)
        return value

    def _reference_for(self, day: date) -> date | None:
        return day if self.use_slot_date else None

    def to_canonical_slot(self, day: date, local_hour: float) -> tuple[date, float]:
        """(canonical day, canonical hour) for a displayed local slot, rolling across midnight."""
        return _roll(day, self.to_canonical_hour(local_hour, self._reference_for(day)))

    def to_local_slot(self, day: date, canonical_hour: float) -> tuple[date, float]:
        """(local day, local hour) for a stored canonical slot, rolling across midnight."""
        return _roll(day, self.to_local_hour(canonical_hour, self._reference_for(day)))


def _roll(day: date, hour: float) -> tuple[date, float]:
    while hour < 0:
        hour += 24
        day -= timedelta(days=1)
    while hour >= 24:
        hour -= 24
        day += timedelta(days=1)
    return day, hour
