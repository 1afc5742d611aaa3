"""Session overlap: which scheduled session, if any, occupies a displayed (day, local hour) slot."""
from __future__ import annotations

from datetime import date
from typing import Iterable

from groupcal.services.sessions.types import SessionInfo
from groupcal.services.timezone.hours import ViewerTimezoneContext


def find_session(
    day: date,
    local_hour: float,
    sessions: Iterable[SessionInfo],
    tz: ViewerTimezoneContext,
) -> SessionInfo | None:
    """
    First session whose canonical day equals the slot's canonical day and whose
    [start_time, end_time) contains the slot's canonical hour. Overlapping sessions are
    an upstream modelling problem; the first match wins and nothing is raised.
    """
    canonical_day, canonical_hour = tz.to_canonical_slot(day, local_hour)
    return find_session_canonical(canonical_day.isoformat(), canonical_hour, sessions)


def find_session_canonical(day_str: str, canonical_hour: float, sessions: Iterable[SessionInfo]) -> SessionInfo | None:
    for session in sessions:
        if session.covers(day_str, canonical_hour):
            return session
    return None


def index_sessions_by_day(sessions: Iterable[SessionInfo]) -> dict[str, list[SessionInfo]]:
    """Group sessions by canonical day, preserving order, so grid lookups only scan one day."""
    by_day: dict[str, list[SessionInfo]] = {}
    for session in sessions:
        by_day.setdefault(session.date, []).append(session)
    return by_day
