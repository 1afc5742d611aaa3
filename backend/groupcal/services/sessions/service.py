"""
Scheduled sessions: admin-managed CRUD plus the read path used by the calendar grid.

Dates are stored as YYYY-MM-DD strings and hours as canonical-timezone floats.
A recurring series is materialized up front: max_recurrences sessions, recurring_days apart,
sharing one recurring_group_id.
"""
import logging
import uuid
from datetime import date, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from groupcal.core.date_range import DateRange
from groupcal.core.errors import InvalidSessionError, NotFoundError, PermissionDeniedError, StoreUnavailableError
from groupcal.models.scheduled_session import ScheduledSession
from groupcal.services.sessions.types import SessionInfo
from groupcal.services.time_format import format_time_range

logger = logging.getLogger(__name__)

MAX_RECURRENCES = 52


def _parse_day(date_str: str) -> date:
    try:
        return date.fromisoformat((date_str or "")[:10])
    except ValueError as e:
        raise InvalidSessionError(f"Invalid session date: {date_str!r}") from e


def validate_session_fields(title: str | None, date_str: str | None, start_time: float | None, end_time: float | None) -> date:
    """Check required fields and 0 <= start < end <= 24. Returns the parsed day."""
    if not (title or "").strip() or not date_str or start_time is None or end_time is None:
        raise InvalidSessionError("Missing required fields")
    if start_time >= end_time:
        raise InvalidSessionError("End time must be after start time")
    if start_time < 0 or end_time > 24:
        raise InvalidSessionError("Session hours must be within 0-24")
    if (start_time * 2) % 1 or (end_time * 2) % 1:
        raise InvalidSessionError("Session hours must be on the hour or half hour")
    return _parse_day(date_str)


def list_sessions(db: Session, campaign_id: str, date_range: DateRange | None = None) -> list[ScheduledSession]:
    """Sessions for a campaign ordered by (date, start_time). Range bounds are inclusive."""
    q = db.query(ScheduledSession).filter(ScheduledSession.campaign_id == campaign_id)
    if date_range is not None:
        q = q.filter(
            ScheduledSession.date >= date_range.start.isoformat(),
            ScheduledSession.date <= date_range.end.isoformat(),
        )
    return q.order_by(ScheduledSession.date.asc(), ScheduledSession.start_time.asc()).all()


def list_session_infos(db: Session, campaign_id: str, date_range: DateRange | None = None) -> list[SessionInfo]:
    """Read path for the grid. Store failures surface as StoreUnavailableError."""
    try:
        return [SessionInfo.from_row(r) for r in list_sessions(db, campaign_id, date_range)]
    except SQLAlchemyError as e:
        logger.warning("list_session_infos failed for %s: %s", campaign_id, e, exc_info=True)
        raise StoreUnavailableError("Session store unavailable") from e


def create_sessions(
    db: Session,
    *,
    campaign_id: str,
    title: str,
    date_str: str,
    start_time: float,
    end_time: float,
    created_by: str,
    notes: str = "",
    is_recurring: bool = False,
    recurring_days: int = 0,
    max_recurrences: int = 0,
) -> tuple[list[ScheduledSession], str | None]:
    """
    Create one session, or a recurring series when is_recurring and both recurring_days
    and max_recurrences are positive. Returns (rows, recurring_group_id or None).
    """
    base_day = validate_session_fields(title, date_str, start_time, end_time)
    if is_recurring and recurring_days > 0 and max_recurrences > 0:
        if max_recurrences > MAX_RECURRENCES:
            raise InvalidSessionError(f"At most {MAX_RECURRENCES} recurrences allowed")
        group_id = uuid.uuid4().hex
        rows = [
            ScheduledSession(
                campaign_id=campaign_id,
                title=title.strip(),
                date=(base_day + timedelta(days=i * recurring_days)).isoformat(),
                start_time=start_time,
                end_time=end_time,
                notes=notes or "",
                created_by=created_by,
                is_recurring=True,
                recurring_days=recurring_days,
                recurring_group_id=group_id,
                recurring_index=i,
                max_recurrences=max_recurrences,
            )
            for i in range(max_recurrences)
        ]
    else:
        group_id = None
        rows = [
            ScheduledSession(
                campaign_id=campaign_id,
                title=title.strip(),
                date=base_day.isoformat(),
                start_time=start_time,
                end_time=end_time,
                notes=notes or "",
                created_by=created_by,
                is_recurring=False,
            )
        ]
    db.add_all(rows)
    db.commit()
    for r in rows:
        db.refresh(r)
    logger.info("Created %s session(s) for campaign %s (group=%s)", len(rows), campaign_id, group_id)
    return rows, group_id


def _get_campaign_session(db: Session, session_id: int, campaign_id: str) -> ScheduledSession:
    row = db.get(ScheduledSession, session_id)
    if row is None:
        raise NotFoundError("Session not found")
    if row.campaign_id != campaign_id:
        raise PermissionDeniedError("Session does not belong to this campaign")
    return row


def update_session(
    db: Session,
    session_id: int,
    *,
    campaign_id: str,
    title: str,
    date_str: str,
    start_time: float,
    end_time: float,
    notes: str = "",
) -> ScheduledSession:
    day = validate_session_fields(title, date_str, start_time, end_time)
    row = _get_campaign_session(db, session_id, campaign_id)
    row.title = title.strip()
    row.date = day.isoformat()
    row.start_time = start_time
    row.end_time = end_time
    row.notes = notes or ""
    db.commit()
    db.refresh(row)
    return row


def delete_session(db: Session, session_id: int, *, campaign_id: str) -> ScheduledSession | None:
    """
    Delete one session. When it is the first of a recurring group that has fewer sessions
    than max_recurrences, the next occurrence after the group's last session is created so
    the series keeps its length. Returns the created session, if any.
    """
    row = _get_campaign_session(db, session_id, campaign_id)
    appended = None
    if row.is_recurring and row.recurring_group_id:
        group = (
            db.query(ScheduledSession)
            .filter(
                ScheduledSession.campaign_id == campaign_id,
                ScheduledSession.recurring_group_id == row.recurring_group_id,
            )
            .order_by(ScheduledSession.recurring_index.asc())
            .all()
        )
        if group and group[0].id == row.id and len(group) < row.max_recurrences:
            last = group[-1]
            appended = ScheduledSession(
                campaign_id=campaign_id,
                title=row.title,
                date=(_parse_day(last.date) + timedelta(days=row.recurring_days)).isoformat(),
                start_time=row.start_time,
                end_time=row.end_time,
                notes=row.notes,
                created_by=row.created_by,
                is_recurring=True,
                recurring_days=row.recurring_days,
                recurring_group_id=row.recurring_group_id,
                recurring_index=last.recurring_index + 1,
                max_recurrences=row.max_recurrences,
            )
            db.add(appended)
    db.delete(row)
    db.commit()
    if appended is not None:
        db.refresh(appended)
        logger.info("Recurring group %s: appended session on %s", appended.recurring_group_id, appended.date)
    return appended


def session_to_dict(row: ScheduledSession, *, use_24h: bool = False) -> dict:
    return {
        "id": row.id,
        "campaign_id": row.campaign_id,
        "title": row.title,
        "date": row.date,
        "start_time": row.start_time,
        "end_time": row.end_time,
        "notes": row.notes or "",
        "created_by": row.created_by,
        "is_recurring": bool(row.is_recurring),
        "recurring_group_id": row.recurring_group_id,
        "recurring_index": row.recurring_index,
        "max_recurrences": row.max_recurrences,
        "label": format_time_range(row.start_time, row.end_time, use_24h),
    }
