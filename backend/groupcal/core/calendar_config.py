"""
Calendar engine config. .env is the source of truth; these defaults apply only when
the env var is unset. All values read at import time.

Env vars: CANONICAL_TIMEZONE, CANONICAL_TIMEZONE_ALIASES, CALENDAR_DAY_START_HOUR,
CALENDAR_DAY_END_HOUR, CALENDAR_WEEK_START (0=Monday .. 6=Sunday),
CALENDAR_MAX_FUTURE_WEEKS, CALENDAR_FETCH_DEBOUNCE_MS, CALENDAR_CONVERT_WITH_SLOT_DATE.

All availability and session hours are stored in CANONICAL_TIMEZONE. Viewers whose
zone is one of CANONICAL_TIMEZONE_ALIASES see canonical hours unchanged.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Load backend/.env so calendar config sees env vars regardless of entry point
_backend_dir = Path(__file__).resolve().parent.parent.parent
_env_path = _backend_dir / ".env"
_env_paths = [_env_path]
if Path.cwd() != _backend_dir:
    _env_paths.extend([Path.cwd() / ".env", Path.cwd() / "backend" / ".env"])
for _p in _env_paths:
    if _p.exists():
        load_dotenv(_p, override=False)
        break

_log = logging.getLogger(__name__)


def _int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    raw = os.environ.get(key)
    if raw is None:
        v = default
    else:
        try:
            v = int(raw.strip())
        except ValueError:
            v = default
    if min_val is not None and v < min_val:
        v = min_val
    if max_val is not None and v > max_val:
        v = max_val
    return v


def _list_str(key: str, default: List[str]) -> List[str]:
    raw = os.environ.get(key)
    if not raw:
        return default
    out = [s.strip() for s in raw.split(",") if s.strip()]
    return out if out else default


# Zones that share New York's wall clock all year (same offsets, same DST rules)
EASTERN_ALIASES = [
    "America/New_York",
    "America/Toronto",
    "America/Detroit",
    "America/Montreal",
    "America/Nassau",
    "US/Eastern",
    "EST5EDT",
]

# -----------------------------------------------------------------------------
# Canonical storage timezone
# -----------------------------------------------------------------------------
CANONICAL_TIMEZONE = os.environ.get("CANONICAL_TIMEZONE", "America/New_York").strip() or "America/New_York"
_default_aliases = EASTERN_ALIASES if CANONICAL_TIMEZONE in EASTERN_ALIASES else [CANONICAL_TIMEZONE]
CANONICAL_TIMEZONE_ALIASES = _list_str("CANONICAL_TIMEZONE_ALIASES", _default_aliases)
if CANONICAL_TIMEZONE not in CANONICAL_TIMEZONE_ALIASES:
    CANONICAL_TIMEZONE_ALIASES = [CANONICAL_TIMEZONE, *CANONICAL_TIMEZONE_ALIASES]

# -----------------------------------------------------------------------------
# Grid and navigation
# -----------------------------------------------------------------------------
CALENDAR_DAY_START_HOUR = _int("CALENDAR_DAY_START_HOUR", 8, min_val=0, max_val=23)
CALENDAR_DAY_END_HOUR = _int("CALENDAR_DAY_END_HOUR", 22, min_val=0, max_val=23)
if CALENDAR_DAY_END_HOUR < CALENDAR_DAY_START_HOUR:
    CALENDAR_DAY_END_HOUR = CALENDAR_DAY_START_HOUR
CALENDAR_WEEK_START = _int("CALENDAR_WEEK_START", 0, min_val=0, max_val=6)
CALENDAR_MAX_FUTURE_WEEKS = _int("CALENDAR_MAX_FUTURE_WEEKS", 12, min_val=1, max_val=104)

# -----------------------------------------------------------------------------
# Client behaviour
# -----------------------------------------------------------------------------
CALENDAR_FETCH_DEBOUNCE_MS = _int("CALENDAR_FETCH_DEBOUNCE_MS", 300, min_val=0, max_val=5000)
# 0: convert hours using today's offsets (known to drift across DST boundaries).
# 1: convert using the date of the slot being displayed.
CALENDAR_CONVERT_WITH_SLOT_DATE = _int("CALENDAR_CONVERT_WITH_SLOT_DATE", 0, min_val=0, max_val=1) == 1

_log.info(
    "Calendar config (from env): canonical_tz=%s aliases=%s hours=%s-%s week_start=%s "
    "max_future_weeks=%s debounce_ms=%s convert_with_slot_date=%s",
    CANONICAL_TIMEZONE,
    CANONICAL_TIMEZONE_ALIASES,
    CALENDAR_DAY_START_HOUR,
    CALENDAR_DAY_END_HOUR,
    CALENDAR_WEEK_START,
    CALENDAR_MAX_FUTURE_WEEKS,
    CALENDAR_FETCH_DEBOUNCE_MS,
    CALENDAR_CONVERT_WITH_SLOT_DATE,
)


@dataclass(frozen=True)
class CalendarConfig:
    """Snapshot of calendar config for passing around (e.g. tests)."""
    canonical_timezone: str
    canonical_aliases: tuple[str, ...]
    day_start_hour: int
    day_end_hour: int
    week_start: int
    max_future_weeks: int
    fetch_debounce_ms: int
    convert_with_slot_date: bool

    @property
    def fetch_debounce_seconds(self) -> float:
        return self.fetch_debounce_ms / 1000.0


def get_calendar_config() -> CalendarConfig:
    return CalendarConfig(
        canonical_timezone=CANONICAL_TIMEZONE,
        canonical_aliases=tuple(CANONICAL_TIMEZONE_ALIASES),
        day_start_hour=CALENDAR_DAY_START_HOUR,
        day_end_hour=CALENDAR_DAY_END_HOUR,
        week_start=CALENDAR_WEEK_START,
        max_future_weeks=CALENDAR_MAX_FUTURE_WEEKS,
        fetch_debounce_ms=CALENDAR_FETCH_DEBOUNCE_MS,
        convert_with_slot_date=CALENDAR_CONVERT_WITH_SLOT_DATE,
    )
