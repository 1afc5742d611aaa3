"""
Backends the calendar controller reads from and writes to.

CalendarBackend is the narrow persistence contract: roster, availability, sessions, settings
and the one-slot write. HttpCalendarBackend implements it against the REST API and skips
malformed session records; tests pass in-memory fakes.
"""
import logging
from datetime import date
from typing import Any, Protocol

import httpx

from groupcal.core.date_range import DateRange
from groupcal.core.errors import (
    CalendarError,
    InvalidRangeError,
    NotFoundError,
    PermissionDeniedError,
    StoreUnavailableError,
)
from groupcal.services.availability.slot_map import SlotMap, all_users_from_raw
from groupcal.services.sessions.types import SessionInfo

logger = logging.getLogger(__name__)

# HTTP status -> error raised by HttpCalendarBackend; anything else is StoreUnavailableError
_STATUS_ERRORS: dict[int, type[CalendarError]] = {
    400: InvalidRangeError,
    403: PermissionDeniedError,
    404: NotFoundError,
}


class CalendarBackend(Protocol):
    """
    All hours exchanged here are canonical-timezone hours. Failures should be raised as
    CalendarError subclasses; the controller still reverts optimistic writes on any other
    exception but lets it propagate.
    """

    async def get_roster(self, campaign_id: str) -> list[str]:
        ...

    async def get_user_availability(self, campaign_id: str, date_range: DateRange) -> SlotMap:
        ...

    async def get_all_availability(self, campaign_id: str, date_range: DateRange) -> dict[str, SlotMap]:
        ...

    async def list_sessions(self, campaign_id: str, date_range: DateRange) -> list[SessionInfo]:
        ...

    async def get_settings(self) -> dict[str, Any]:
        """Global settings; the controller reads max_future_weeks from here."""
        ...

    async def set_slot(self, campaign_id: str, day: date, canonical_hour: float, is_available: bool) -> bool:
        """Persist one slot for the current user. Raises StoreUnavailableError on failure."""
        ...


class HttpCalendarBackend:
    """
    CalendarBackend over the groupcal REST API. Identity goes in X-Username / X-Is-Admin.
    Pass client= to reuse an httpx.AsyncClient (e.g. one bound to an ASGI app in tests).
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        *,
        is_admin: bool = False,
        timeout: float = 20.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.is_admin = is_admin
        self._timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {"X-Username": self.username, "X-Is-Admin": "true" if self.is_admin else "false"}

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        if self._client is not None:
            return await self._client.request(method, url, headers=self._headers(), **kwargs)
        async with httpx.AsyncClient(timeout=self._timeout) as c:
            return await c.request(method, url, headers=self._headers(), **kwargs)

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            r = await self._send(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Calendar API %s %s failed: %s", method, path, e)
            raise StoreUnavailableError(f"Calendar API unreachable: {e}") from e
        if not r.is_success:
            error_type = _STATUS_ERRORS.get(r.status_code, StoreUnavailableError)
            raise error_type(f"Calendar API error: {r.status_code} {(r.text or '')[:200]}")
        try:
            data = r.json() if r.content else {}
        except ValueError as e:
            raise StoreUnavailableError("Calendar API returned invalid JSON") from e
        if not isinstance(data, dict):
            raise StoreUnavailableError("Calendar API returned an unexpected payload")
        return data

    @staticmethod
    def _range_params(campaign_id: str, date_range: DateRange) -> dict[str, str]:
        return {
            "campaign_id": campaign_id,
            "start": date_range.start.isoformat(),
            "end": date_range.end.isoformat(),
        }

    async def get_roster(self, campaign_id: str) -> list[str]:
        data = await self._request("GET", "/calendar/roster", params={"campaign_id": campaign_id})
        roster = data.get("roster") or []
        if not isinstance(roster, list):
            raise StoreUnavailableError("Calendar API returned a malformed roster")
        return [str(u) for u in roster]

    async def get_user_availability(self, campaign_id: str, date_range: DateRange) -> SlotMap:
        data = await self._request("GET", "/calendar/availability", params=self._range_params(campaign_id, date_range))
        try:
            return SlotMap.from_raw(data.get("availability"))
        except (AttributeError, TypeError, ValueError) as e:
            raise StoreUnavailableError(f"Calendar API returned malformed availability: {e}") from e

    async def get_all_availability(self, campaign_id: str, date_range: DateRange) -> dict[str, SlotMap]:
        data = await self._request(
            "GET", "/calendar/all-availability", params=self._range_params(campaign_id, date_range)
        )
        try:
            return all_users_from_raw(data.get("availability"))
        except (AttributeError, TypeError, ValueError) as e:
            raise StoreUnavailableError(f"Calendar API returned malformed availability: {e}") from e

    async def list_sessions(self, campaign_id: str, date_range: DateRange) -> list[SessionInfo]:
        data = await self._request("GET", "/scheduled-sessions", params=self._range_params(campaign_id, date_range))
        raw = data.get("sessions") or []
        if not isinstance(raw, list):
            raise StoreUnavailableError("Calendar API returned malformed sessions")
        sessions = []
        for item in raw:
            try:
                sessions.append(SessionInfo.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning("Skipping malformed session record %r: %s", item, e)
        return sessions

    async def get_settings(self) -> dict[str, Any]:
        data = await self._request("GET", "/settings")
        settings = data.get("settings")
        if not isinstance(settings, dict):
            raise StoreUnavailableError("Calendar API returned malformed settings")
        return settings

    async def set_slot(self, campaign_id: str, day: date, canonical_hour: float, is_available: bool) -> bool:
        await self._request(
            "POST",
            "/calendar/availability",
            json={
                "campaign_id": campaign_id,
                "date": day.isoformat(),
                "hour": canonical_hour,
                "is_available": bool(is_available),
            },
        )
        return True
