"""
UI-facing calendar state: the current view, fetched group data, and the viewer's own slots.

Fetches are debounced and keyed by date range. A range that equals the last requested one is
not fetched again, and a response whose range is no longer current is dropped. Reads that fail
leave availability empty (everyone unavailable) but keep the last known roster so totals stay
right. Writes are optimistic: the slot flips immediately and is put back exactly as it was if
the backend rejects the write. Several writes to one slot may be in flight; only the latest
one decides what is displayed once it settles, and refetches keep showing its value until
then. Unless max_future_weeks is passed in, the stored global setting is reloaded with every
fetch and bounds forward navigation. Drag-to-paint writes only the cells whose value actually
changed, independently, and reports each result.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable
from zoneinfo import ZoneInfo

from groupcal.core.calendar_config import CalendarConfig, get_calendar_config
from groupcal.core.constants import GRANULARITY_HOUR, ZOOM_NORMAL
from groupcal.core.date_range import DateRange
from groupcal.core.errors import CalendarError
from groupcal.services.aggregation.aggregate import SlotGrid, aggregate
from groupcal.services.availability.slot_map import SlotMap, slot_key
from groupcal.services.calendar.backend import CalendarBackend
from groupcal.services.calendar.view_model import (
    NAV_BACKWARD,
    NAV_FORWARD,
    NAV_TODAY,
    CalendarView,
    build_view,
    navigate,
)
from groupcal.services.sessions.types import SessionInfo
from groupcal.services.timezone.hours import ViewerTimezoneContext

logger = logging.getLogger(__name__)

_ABSENT = object()


@dataclass(frozen=True)
class SlotWriteResult:
    day: date  # local
    hour: float  # local
    key: str  # canonical
    is_available: bool  # value requested
    ok: bool
    error: str | None = None


@dataclass
class _DragState:
    value: bool
    # canonical key -> (local day, local hour, value before the drag or _ABSENT)
    cells: dict[str, tuple[date, float, object]] = field(default_factory=dict)


class CalendarController:
    def __init__(
        self,
        backend: CalendarBackend,
        campaign_id: str,
        tz: ViewerTimezoneContext,
        *,
        username: str,
        config: CalendarConfig | None = None,
        max_future_weeks: int | None = None,
        debounce_seconds: float | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self.backend = backend
        self.campaign_id = campaign_id
        self.tz = tz
        self.username = username
        self.config = config or get_calendar_config()
        # Without an explicit limit the stored global setting is read on every fetch
        self._weeks_from_settings = max_future_weeks is None
        self.max_future_weeks = max_future_weeks or self.config.max_future_weeks
        self.debounce_seconds = (
            self.config.fetch_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self._today = today or (lambda: datetime.now(ZoneInfo(tz.name)).date())

        self.view: CalendarView | None = None
        self.roster: list[str] = []
        self.all_availability: dict[str, SlotMap] = {}
        self.sessions: list[SessionInfo] = []
        self.own = SlotMap()
        self.loaded_range_key: str | None = None
        self.last_error: str | None = None

        self._requested_key: str | None = None
        self._tasks: set[asyncio.Task] = set()
        # canonical key -> (sequence number of the latest write, value it requested)
        self._pending_writes: dict[str, tuple[int, bool]] = {}
        self._write_seq = 0
        self._drag: _DragState | None = None

    # ------------------------------------------------------------------
    # View and fetching
    # ------------------------------------------------------------------

    async def set_view(
        self,
        anchor: date,
        zoom: str | None = None,
        granularity: str | None = None,
    ) -> CalendarView:
        """Switch the view; schedules a debounced fetch unless the range is already requested."""
        view = build_view(
            anchor,
            zoom or (self.view.zoom if self.view else ZOOM_NORMAL),
            granularity or (self.view.granularity if self.view else GRANULARITY_HOUR),
            config=self.config,
        )
        self.view = view
        if view.range_key == self._requested_key:
            logger.debug("Fetch for %s already requested; skipping", view.range_key)
            return view
        self._schedule_fetch(view.date_range)
        return view

    async def refresh(self) -> None:
        """Refetch the current range now, bypassing duplicate suppression."""
        if self.view is not None:
            self._requested_key = self.view.range_key
            await self._fetch(self.view.date_range)

    async def settle(self) -> None:
        """Wait for every scheduled fetch to finish (or be discarded)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _schedule_fetch(self, date_range: DateRange) -> None:
        self._requested_key = date_range.key
        task = asyncio.create_task(self._debounced_fetch(date_range))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _debounced_fetch(self, date_range: DateRange) -> None:
        if self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
        if date_range.key != self._requested_key:
            logger.debug("Fetch for %s superseded during debounce", date_range.key)
            return
        await self._fetch(date_range)

    async def _fetch(self, date_range: DateRange) -> None:
        # Canonical days can spill one day past local midnight on either side
        fetch_range = date_range.widen(1)
        reads = [
            self.backend.get_roster(self.campaign_id),
            self.backend.get_all_availability(self.campaign_id, fetch_range),
            self.backend.list_sessions(self.campaign_id, fetch_range),
        ]
        if self._weeks_from_settings:
            reads.append(self.backend.get_settings())
        roster, availability, sessions, *rest = await asyncio.gather(*reads, return_exceptions=True)
        if rest:
            self._apply_settings(rest[0])
        if date_range.key != self._requested_key:
            logger.debug("Discarding stale response for %s (current %s)", date_range.key, self._requested_key)
            return
        errors = [r for r in (roster, availability, sessions) if isinstance(r, BaseException)]
        for err in errors:
            if not isinstance(err, CalendarError):
                raise err
        self.last_error = str(errors[0]) if errors else None
        if errors:
            logger.warning("Calendar fetch for %s degraded: %s", date_range.key, self.last_error)

        if not isinstance(roster, BaseException):
            self.roster = list(roster)
        self.all_availability = {} if isinstance(availability, BaseException) else dict(availability)
        self.sessions = [] if isinstance(sessions, BaseException) else list(sessions)
        self.own = self.all_availability.get(self.username, SlotMap()).copy()
        for key, (_, value) in self._pending_writes.items():
            self.own[key] = value
        self.loaded_range_key = date_range.key

    def _apply_settings(self, settings: object) -> None:
        if isinstance(settings, BaseException):
            if not isinstance(settings, CalendarError):
                raise settings
            logger.warning("Could not load settings, keeping max_future_weeks=%s: %s", self.max_future_weeks, settings)
            return
        weeks = settings.get("max_future_weeks") if isinstance(settings, dict) else None
        if isinstance(weeks, int) and not isinstance(weeks, bool) and weeks > 0:
            self.max_future_weeks = weeks
        else:
            logger.warning("Ignoring invalid max_future_weeks setting: %r", weeks)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    async def _navigate(self, direction: str) -> CalendarView:
        if self.view is None:
            return await self.set_view(self._today())
        anchor = navigate(
            self.view.anchor,
            self.view.zoom,
            direction,
            today=self._today(),
            max_future_weeks=self.max_future_weeks,
        )
        return await self.set_view(anchor)

    async def forward(self) -> CalendarView:
        return await self._navigate(NAV_FORWARD)

    async def backward(self) -> CalendarView:
        return await self._navigate(NAV_BACKWARD)

    async def go_today(self) -> CalendarView:
        return await self._navigate(NAV_TODAY)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def is_available(self, day: date, local_hour: float) -> bool:
        canonical_day, canonical_hour = self.tz.to_canonical_slot(day, local_hour)
        return self.own[slot_key(canonical_day, canonical_hour)]

    def grid(self) -> SlotGrid:
        if self.view is None:
            raise CalendarError("No view selected")
        users = dict(self.all_availability)
        users[self.username] = self.own
        return aggregate(
            self.view.date_range,
            self.view.hour_grid,
            users,
            self.sessions,
            tz=self.tz,
            roster=self.roster,
            viewer=self.username,
            viewer_slots=self.own,
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _apply(self, key: str, value: object) -> None:
        if value is _ABSENT:
            self.own.pop(key, None)
        else:
            self.own[key] = bool(value)

    async def _write(self, day: date, local_hour: float, value: bool, previous: object) -> SlotWriteResult:
        canonical_day, canonical_hour = self.tz.to_canonical_slot(day, local_hour)
        key = slot_key(canonical_day, canonical_hour)
        self._write_seq += 1
        seq = self._write_seq
        self.own[key] = value
        self._pending_writes[key] = (seq, value)
        try:
            await self.backend.set_slot(self.campaign_id, canonical_day, canonical_hour, value)
        except Exception as e:
            # A newer write on the same key owns the displayed value until it settles
            if self._finish_write(key, seq):
                self._apply(key, previous)
            if not isinstance(e, CalendarError):
                raise
            logger.warning("Slot write %s=%s failed, reverted: %s", key, value, e)
            return SlotWriteResult(day, local_hour, key, value, ok=False, error=str(e))
        if self._finish_write(key, seq):
            self.own[key] = value
        return SlotWriteResult(day, local_hour, key, value, ok=True)

    def _finish_write(self, key: str, seq: int) -> bool:
        """Clear the pending marker if it still belongs to write `seq`; True when it did."""
        pending = self._pending_writes.get(key)
        if pending is None or pending[0] != seq:
            return False
        del self._pending_writes[key]
        return True

    def _current(self, day: date, local_hour: float) -> tuple[str, object]:
        canonical_day, canonical_hour = self.tz.to_canonical_slot(day, local_hour)
        key = slot_key(canonical_day, canonical_hour)
        return key, dict.get(self.own, key, _ABSENT)

    async def set_availability(self, day: date, local_hour: float, value: bool) -> SlotWriteResult:
        _, previous = self._current(day, local_hour)
        return await self._write(day, local_hour, bool(value), previous)

    async def toggle(self, day: date, local_hour: float) -> SlotWriteResult:
        key, previous = self._current(day, local_hour)
        return await self._write(day, local_hour, not self.own[key], previous)

    # ------------------------------------------------------------------
    # Drag to paint
    # ------------------------------------------------------------------

    def begin_drag(self, day: date, local_hour: float) -> bool:
        """Start painting; the painted value is the opposite of the first cell's value."""
        key, _ = self._current(day, local_hour)
        self._drag = _DragState(value=not self.own[key])
        self.drag_over(day, local_hour)
        return self._drag.value

    def drag_over(self, day: date, local_hour: float) -> None:
        if self._drag is None:
            return
        key, previous = self._current(day, local_hour)
        if key in self._drag.cells:
            return
        self._drag.cells[key] = (day, local_hour, previous)
        self.own[key] = self._drag.value

    def cancel_drag(self) -> None:
        if self._drag is None:
            return
        for key, (_, _, previous) in self._drag.cells.items():
            self._apply(key, previous)
        self._drag = None

    async def end_drag(self) -> list[SlotWriteResult]:
        """Persist painted cells whose value changed. Failures revert per slot, not as a batch."""
        drag, self._drag = self._drag, None
        if drag is None:
            return []
        changed = [
            (day, hour, previous)
            for day, hour, previous in drag.cells.values()
            if (previous is not _ABSENT and bool(previous)) != drag.value
        ]
        if not changed:
            return []
        return list(
            await asyncio.gather(*(self._write(day, hour, drag.value, previous) for day, hour, previous in changed))
        )
