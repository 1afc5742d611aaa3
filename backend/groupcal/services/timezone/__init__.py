"""
Viewer timezone: resolution of the viewer's IANA zone and canonical <-> local hour conversion.
"""
from groupcal.services.timezone.hours import HourConversionCache, ViewerTimezoneContext
from groupcal.services.timezone.resolve import ViewerTimezone, resolve_viewer_timezone, runtime_timezone_name

__all__ = [
    "HourConversionCache",
    "ViewerTimezone",
    "ViewerTimezoneContext",
    "resolve_viewer_timezone",
    "runtime_timezone_name",
]
