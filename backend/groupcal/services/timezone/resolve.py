"""
Viewer timezone resolution.

The viewer's zone comes from an explicit IANA name (e.g. sent by the browser) or, when
none is given, from the runtime environment: TZ, /etc/timezone, then the /etc/localtime
symlink. Anything that cannot be resolved falls back to the canonical zone, and the
viewer is then treated as canonical.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from groupcal.core.calendar_config import CalendarConfig, get_calendar_config

logger = logging.getLogger(__name__)

_ETC_TIMEZONE = Path("/etc/timezone")
_ETC_LOCALTIME = Path("/etc/localtime")


@dataclass(frozen=True)
class ViewerTimezone:
    name: str
    is_canonical: bool


def runtime_timezone_name() -> str | None:
    """IANA name configured for this process, or None when it cannot be determined."""
    tz_env = (os.environ.get("TZ") or "").strip().lstrip(":")
    if tz_env:
        return tz_env
    try:
        if _ETC_TIMEZONE.is_file():
            name = _ETC_TIMEZONE.read_text().strip()
            if name:
                return name
    except OSError:
        pass
    try:
        if _ETC_LOCALTIME.is_symlink():
            target = str(_ETC_LOCALTIME.resolve())
            if "zoneinfo/" in target:
                return target.split("zoneinfo/", 1)[1]
    except OSError:
        pass
    return None


def is_known_zone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def resolve_viewer_timezone(name: str | None = None, config: CalendarConfig | None = None) -> ViewerTimezone:
    """
    Resolve the viewer's IANA zone and whether it shares the canonical wall clock.
    Never raises: unknown or missing names fall back to the canonical zone.
    """
    cfg = config or get_calendar_config()
    candidate = (name or "").strip() or runtime_timezone_name()
    if not candidate or not is_known_zone(candidate):
        if candidate:
            logger.warning("Unknown viewer timezone %r; using canonical %s", candidate, cfg.canonical_timezone)
        return ViewerTimezone(name=cfg.canonical_timezone, is_canonical=True)
    return ViewerTimezone(name=candidate, is_canonical=candidate in cfg.canonical_aliases)
