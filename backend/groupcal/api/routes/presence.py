"""
Active users (admin). Clients POST a heartbeat while a page is open; the list shows users seen
within PRESENCE_TIMEOUT_MINUTES. The store lives on app.state and is swept by the scheduler.
"""
from typing import Any

from fastapi import APIRouter, Depends, Request

from groupcal.api.deps import Identity, get_identity, require_admin
from groupcal.services.presence import PresenceStore

router = APIRouter()


def get_presence(request: Request) -> PresenceStore:
    return request.app.state.presence


@router.post("/heartbeat")
def heartbeat(
    identity: Identity = Depends(get_identity),
    store: PresenceStore = Depends(get_presence),
) -> dict[str, Any]:
    seen = store.touch(identity.username)
    return {"success": True, "last_seen": seen.isoformat()}


@router.get("")
def active_users(
    identity: Identity = Depends(require_admin),
    store: PresenceStore = Depends(get_presence),
) -> dict[str, Any]:
    users = store.active()
    return {"success": True, "active_users": users, "count": len(users)}
