"""
Request identity. Authentication happens upstream; the calendar only consumes the caller's
username and admin flag, passed as X-Username / X-Is-Admin headers.
"""
from dataclasses import dataclass
from typing import NoReturn

from fastapi import Depends, Header, HTTPException

from groupcal.core.errors import calendar_error_to_http

_TRUE_HEADER_VALUES = ("1", "true", "yes")


@dataclass(frozen=True)
class Identity:
    username: str
    is_admin: bool = False


def get_identity(
    x_username: str | None = Header(None, alias="X-Username"),
    x_is_admin: str | None = Header(None, alias="X-Is-Admin"),
) -> Identity:
    username = (x_username or "").strip()
    if not username:
        raise HTTPException(status_code=401, detail={"success": False, "error": "Not authenticated"})
    return Identity(username=username, is_admin=(x_is_admin or "").strip().lower() in _TRUE_HEADER_VALUES)


def require_admin(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=403, detail={"success": False, "error": "Admin access required"})
    return identity


def raise_http(exc: Exception) -> NoReturn:
    raise calendar_error_to_http(exc) from exc
