"""
Scheduled sessions API. Members (and admins) list; admins create, update and delete.
Dates are YYYY-MM-DD and hours are canonical-timezone floats (half hours allowed).
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from groupcal.api.deps import Identity, get_identity, raise_http, require_admin
from groupcal.core.date_range import DateRange
from groupcal.core.errors import CalendarError, InvalidRangeError
from groupcal.db.session import get_db
from groupcal.services.campaign_service import get_campaign, require_access
from groupcal.services.sessions.service import (
    create_sessions,
    delete_session,
    list_sessions,
    session_to_dict,
    update_session,
)

router = APIRouter()
logger = logging.getLogger(__name__)


class SessionBody(BaseModel):
    campaign_id: str = Field(..., min_length=1)
    title: str
    date: str
    start_time: float
    end_time: float
    notes: str = ""


class CreateSessionBody(SessionBody):
    is_recurring: bool = False
    recurring_days: int = Field(0, ge=0)
    max_recurrences: int = Field(0, ge=0)


@router.get("")
def get_sessions(
    campaign_id: str = Query(...),
    start: str | None = Query(None),
    end: str | None = Query(None),
    use_24h: bool = Query(False),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    try:
        if bool(start) != bool(end):
            raise InvalidRangeError("start and end must be given together")
        date_range = DateRange.parse(start, end) if start and end else None
        require_access(db, campaign_id, identity.username, identity.is_admin)
        rows = list_sessions(db, campaign_id, date_range)
    except CalendarError as e:
        raise_http(e)
    return {"success": True, "sessions": [session_to_dict(r, use_24h=use_24h) for r in rows]}


@router.post("")
def post_session(
    body: CreateSessionBody,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    try:
        get_campaign(db, body.campaign_id)
        rows, group_id = create_sessions(
            db,
            campaign_id=body.campaign_id,
            title=body.title,
            date_str=body.date,
            start_time=body.start_time,
            end_time=body.end_time,
            notes=body.notes,
            created_by=identity.username,
            is_recurring=body.is_recurring,
            recurring_days=body.recurring_days,
            max_recurrences=body.max_recurrences,
        )
    except CalendarError as e:
        raise_http(e)
    return {
        "success": True,
        "sessions": [session_to_dict(r) for r in rows],
        "recurring_group_id": group_id,
    }


@router.put("/{session_id}")
def put_session(
    session_id: int,
    body: SessionBody,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    try:
        row = update_session(
            db,
            session_id,
            campaign_id=body.campaign_id,
            title=body.title,
            date_str=body.date,
            start_time=body.start_time,
            end_time=body.end_time,
            notes=body.notes,
        )
    except CalendarError as e:
        raise_http(e)
    return {"success": True, "session": session_to_dict(row)}


@router.delete("/{session_id}")
def remove_session(
    session_id: int,
    campaign_id: str = Query(...),
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    try:
        appended = delete_session(db, session_id, campaign_id=campaign_id)
    except CalendarError as e:
        raise_http(e)
    logger.info("Session %s deleted by %s", session_id, identity.username)
    return {"success": True, "appended": session_to_dict(appended) if appended else None}
