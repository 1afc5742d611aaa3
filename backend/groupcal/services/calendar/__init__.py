"""
Calendar view model, the UI-facing controller and the backends it talks to.
"""
from groupcal.services.calendar.backend import CalendarBackend, HttpCalendarBackend
from groupcal.services.calendar.controller import CalendarController, SlotWriteResult
from groupcal.services.calendar.view_model import CalendarView, build_view, hour_grid, navigate

__all__ = [
    "CalendarBackend",
    "CalendarController",
    "CalendarView",
    "HttpCalendarBackend",
    "SlotWriteResult",
    "build_view",
    "hour_grid",
    "navigate",
]
