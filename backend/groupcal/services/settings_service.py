"""
Global settings stored in the settings table (key='global').
Only max_future_weeks today; when no row exists the env default from calendar_config applies.
"""
import logging

from sqlalchemy.orm import Session

from groupcal.core.calendar_config import CALENDAR_MAX_FUTURE_WEEKS
from groupcal.core.constants import GLOBAL_SETTINGS_KEY
from groupcal.core.errors import InvalidRangeError
from groupcal.models.setting import Setting

logger = logging.getLogger(__name__)


def get_max_future_weeks(db: Session) -> int:
    row = db.get(Setting, GLOBAL_SETTINGS_KEY)
    if row is None or not row.max_future_weeks:
        return CALENDAR_MAX_FUTURE_WEEKS
    return int(row.max_future_weeks)


def get_settings(db: Session) -> dict:
    return {"max_future_weeks": get_max_future_weeks(db)}


def update_settings(db: Session, max_future_weeks) -> dict:
    """Set max_future_weeks. Must be a positive integer (bools rejected)."""
    if isinstance(max_future_weeks, bool) or not isinstance(max_future_weeks, int) or max_future_weeks < 1:
        raise InvalidRangeError("max_future_weeks must be a positive integer")
    row = db.get(Setting, GLOBAL_SETTINGS_KEY)
    if row is None:
        row = Setting(key=GLOBAL_SETTINGS_KEY, max_future_weeks=max_future_weeks)
        db.add(row)
    else:
        row.max_future_weeks = max_future_weeks
    db.commit()
    logger.info("Settings updated: max_future_weeks=%s", max_future_weeks)
    return get_settings(db)
