"""
Group availability aggregation: per displayed (day, local hour) cell, how many roster members
are available, the tier derived from count/total, and the scheduled session occupying it.

Work is linear in users x slots: every user's true keys are tallied once into a per-key
counter, then the grid is walked once and each cell does a dict lookup.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping, Sequence

from groupcal.core.constants import TIER_EMPTY, TIER_FULL, TIER_NONE, TIER_ORDER, TIER_SCHEDULED, TIER_THRESHOLDS
from groupcal.core.date_range import DateRange
from groupcal.services.availability.slot_map import SlotMap, slot_key
from groupcal.services.sessions.overlap import find_session_canonical, index_sessions_by_day
from groupcal.services.sessions.types import SessionInfo
from groupcal.services.timezone.hours import ViewerTimezoneContext

logger = logging.getLogger(__name__)


def tier_for(count: int, total: int, has_session: bool = False) -> str:
    """
    scheduled if a session occupies the slot; empty if nobody is counted; otherwise by ratio:
    0 none, (0, .25) low, [.25, .5) low-mid, [.5, .75) mid-high, [.75, 1) high, 1 full.
    """
    if has_session:
        return TIER_SCHEDULED
    if total <= 0:
        return TIER_EMPTY
    if count <= 0:
        return TIER_NONE
    if count >= total:
        return TIER_FULL
    ratio = count / total
    for lower, tier in TIER_THRESHOLDS:
        if ratio >= lower:
            return tier
    return TIER_NONE


def tier_rank(tier: str) -> int:
    return TIER_ORDER.index(tier)


@dataclass
class Slot:
    day: date  # displayed (viewer-local) day
    hour: float  # displayed (viewer-local) hour
    canonical_day: date
    canonical_hour: float
    key: str  # canonical slot key, as stored
    is_available: bool
    count: int
    total: int
    tier: str
    session: SessionInfo | None = None
    available_users: list[str] = field(default_factory=list)

    @property
    def ratio(self) -> float:
        return self.count / self.total if self.total else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "hour": self.hour,
            "canonical_date": self.canonical_day.isoformat(),
            "canonical_hour": self.canonical_hour,
            "key": self.key,
            "is_available": self.is_available,
            "count": self.count,
            "total": self.total,
            "tier": self.tier,
            "session": self.session.to_dict() if self.session else None,
            "available_users": list(self.available_users),
        }


@dataclass
class SlotGrid:
    date_range: DateRange
    hour_grid: tuple[float, ...]
    timezone: str
    total: int
    slots: list[Slot]

    def __post_init__(self) -> None:
        self._by_cell = {(s.day, s.hour): s for s in self.slots}

    def cell(self, day: date, hour: float) -> Slot:
        return self._by_cell[(day, hour)]

    def rows(self) -> list[list[Slot]]:
        """One row per hour, one column per day, in display order."""
        return [[self._by_cell[(d, h)] for d in self.date_range] for h in self.hour_grid]

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.date_range.start.isoformat(),
            "end": self.date_range.end.isoformat(),
            "hours": list(self.hour_grid),
            "timezone": self.timezone,
            "total": self.total,
            "slots": [s.to_dict() for s in self.slots],
        }


def _as_slot_map(value: Mapping[str, Any] | None) -> SlotMap:
    if isinstance(value, SlotMap):
        return value
    return SlotMap.from_raw(value)


def aggregate(
    date_range: DateRange,
    hour_grid: Sequence[float],
    all_users_availability: Mapping[str, Mapping[str, Any]],
    sessions: Iterable[SessionInfo],
    *,
    tz: ViewerTimezoneContext,
    roster: Iterable[str] | None = None,
    viewer: str | None = None,
    viewer_slots: Mapping[str, Any] | None = None,
) -> SlotGrid:
    """
    Aggregate canonical availability maps into the viewer's local grid.

    roster: usernames counted in total, whether or not they have records. When None, the
    users present in all_users_availability are counted. Availability of users outside the
    roster is ignored.
    viewer / viewer_slots: whose is_available to report; viewer_slots overrides the stored map
    (e.g. with optimistic local edits).
    """
    users = sorted(set(roster)) if roster is not None else sorted(all_users_availability)
    total = len(users)

    available_by_key: dict[str, list[str]] = defaultdict(list)
    for username in users:
        for key in _as_slot_map(all_users_availability.get(username)).true_keys():
            available_by_key[key].append(username)

    if viewer_slots is not None:
        own = _as_slot_map(viewer_slots)
    elif viewer is not None:
        own = _as_slot_map(all_users_availability.get(viewer))
    else:
        own = SlotMap()

    sessions_by_day = index_sessions_by_day(sessions)
    hours = tuple(hour_grid)
    slots: list[Slot] = []
    for day in date_range:
        for hour in hours:
            canonical_day, canonical_hour = tz.to_canonical_slot(day, hour)
            key = slot_key(canonical_day, canonical_hour)
            day_str = canonical_day.isoformat()
            session = find_session_canonical(day_str, canonical_hour, sessions_by_day.get(day_str, ()))
            who = available_by_key.get(key, [])
            slots.append(
                Slot(
                    day=day,
                    hour=hour,
                    canonical_day=canonical_day,
                    canonical_hour=canonical_hour,
                    key=key,
                    is_available=own[key],
                    count=len(who),
                    total=total,
                    tier=tier_for(len(who), total, session is not None),
                    session=session,
                    available_users=list(who),
                )
            )
    logger.debug(
        "Aggregated %s slots for %s users over %s (tz=%s)", len(slots), total, date_range.key, tz.name
    )
    return SlotGrid(date_range=date_range, hour_grid=hours, timezone=tz.name, total=total, slots=slots)
