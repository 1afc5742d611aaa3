"""Global settings: anyone may read, admins may change max_future_weeks."""
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from groupcal.api.deps import Identity, get_identity, raise_http, require_admin
from groupcal.core.errors import CalendarError
from groupcal.db.session import get_db
from groupcal.services.settings_service import get_settings, update_settings

router = APIRouter()


class SettingsBody(BaseModel):
    max_future_weeks: Any = None


@router.get("")
def read_settings(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)) -> dict[str, Any]:
    return {"success": True, "settings": get_settings(db)}


@router.post("")
def write_settings(
    body: SettingsBody,
    identity: Identity = Depends(require_admin),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    try:
        updated = update_settings(db, body.max_future_weeks)
    except CalendarError as e:
        raise_http(e)
    return {"success": True, "settings": updated}
