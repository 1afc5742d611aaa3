"""
Scheduled sessions: CRUD for the admin surface and the timezone-aware overlap test used by the grid.
"""
from groupcal.services.sessions.overlap import find_session, find_session_canonical, index_sessions_by_day
from groupcal.services.sessions.types import SessionInfo

__all__ = ["SessionInfo", "find_session", "find_session_canonical", "index_sessions_by_day"]
