"""
Calendar API: per-slot availability reads/writes, group availability, roster, and the
aggregated grid for one view.

All hours in availability payloads are canonical-timezone hours except /calendar/grid, which
returns cells in the viewer's timezone (tz query param) alongside their canonical keys.
"""
import logging
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from groupcal.api.deps import Identity, get_identity, raise_http
from groupcal.core.calendar_config import get_calendar_config
from groupcal.core.constants import GRANULARITY_HOUR, ZOOM_NORMAL
from groupcal.core.date_range import DateRange
from groupcal.core.errors import CalendarError, InvalidRangeError
from groupcal.db.session import get_db
from groupcal.services.aggregation import aggregate
from groupcal.services.availability import get_all_availability, get_user_availability, localize, set_slot
from groupcal.services.calendar.view_model import build_view
from groupcal.services.campaign_service import get_roster, require_access
from groupcal.services.sessions.service import list_session_infos
from groupcal.services.timezone import ViewerTimezoneContext

router = APIRouter()
logger = logging.getLogger(__name__)


class SetSlotRequest(BaseModel):
    campaign_id: str = Field(..., min_length=1)
    day: date = Field(..., alias="date")
    hour: float = Field(..., ge=0, lt=24, description="Canonical hour, whole or half")
    is_available: bool


@router.get("/availability")
def read_my_availability(
    start: str = Query(...),
    end: str = Query(...),
    campaign_id: str = Query(...),
    tz: str | None = Query(None, description="IANA zone; when set, keys are re-keyed to local time"),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    try:
        date_range = DateRange.parse(start, end)
        require_access(db, campaign_id, identity.username, identity.is_admin)
        slots = get_user_availability(db, identity.username, campaign_id, date_range)
        if tz:
            slots = localize(slots, ViewerTimezoneContext.resolve(tz))
    except CalendarError as e:
        raise_http(e)
    return {"success": True, "availability": dict(slots)}


@router.post("/availability")
def write_slot(
    body: SetSlotRequest,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    try:
        if (body.hour * 2) % 1:
            raise InvalidRangeError("Hour must be on the hour or half hour")
        require_access(db, body.campaign_id, identity.username, identity.is_admin)
        set_slot(db, identity.username, body.campaign_id, body.day, body.hour, body.is_available)
    except CalendarError as e:
        raise_http(e)
    return {"success": True}


@router.get("/all-availability")
def read_all_availability(
    start: str = Query(...),
    end: str = Query(...),
    campaign_id: str = Query(...),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    try:
        date_range = DateRange.parse(start, end)
        require_access(db, campaign_id, identity.username, identity.is_admin)
        by_user = get_all_availability(db, campaign_id, date_range)
    except CalendarError as e:
        raise_http(e)
    return {"success": True, "availability": {u: dict(m) for u, m in by_user.items()}}


@router.get("/roster")
def read_roster(
    campaign_id: str = Query(...),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    try:
        require_access(db, campaign_id, identity.username, identity.is_admin)
        roster = get_roster(db, campaign_id)
    except CalendarError as e:
        raise_http(e)
    return {"success": True, "roster": roster}


@router.get("/grid")
def read_grid(
    campaign_id: str = Query(...),
    anchor: date | None = Query(None, description="Defaults to today in the viewer's timezone"),
    zoom: str = Query(ZOOM_NORMAL),
    granularity: str = Query(GRANULARITY_HOUR),
    tz: str | None = Query(None),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    Aggregated grid for one view. Total counts every roster member; a store failure on the
    availability read degrades to an empty grid (everyone unavailable) instead of failing.
    """
    config = get_calendar_config()
    try:
        tz_ctx = ViewerTimezoneContext.resolve(tz, config=config)
        view = build_view(anchor or datetime.now(ZoneInfo(tz_ctx.name)).date(), zoom, granularity, config=config)
        require_access(db, campaign_id, identity.username, identity.is_admin)
        roster = get_roster(db, campaign_id)
        fetch_range = view.date_range.widen(1)
        degraded = None
        try:
            by_user = get_all_availability(db, campaign_id, fetch_range)
        except CalendarError as e:
            by_user, degraded = {}, str(e)
        try:
            sessions = list_session_infos(db, campaign_id, fetch_range)
        except CalendarError as e:
            sessions, degraded = [], str(e)
        grid = aggregate(
            view.date_range,
            view.hour_grid,
            by_user,
            sessions,
            tz=tz_ctx,
            roster=roster,
            viewer=identity.username,
        )
    except CalendarError as e:
        raise_http(e)
    return {
        "success": True,
        "anchor": view.anchor.isoformat(),
        "zoom": view.zoom,
        "granularity": view.granularity,
        "is_canonical": tz_ctx.is_canonical,
        "degraded": degraded,
        **grid.to_dict(),
    }
