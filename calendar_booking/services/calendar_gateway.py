# calendar_booking/services/calendar_gateway.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from calendar_booking.core.config import get_settings
from calendar_booking.services.calendar_errors import (
    CalendarAuthError,
    CalendarGatewayError,
    CalendarProviderError,
)
from calendar_booking.services.credential_store import CredentialStore
from calendar_booking.services.google_oauth import GoogleOAuthClient, build_oauth_client

__all__ = [
    "CalendarAuthError",
    "CalendarGateway",
    "CalendarGatewayError",
    "CalendarProviderError",
]

logger = logging.getLogger(__name__)


class CalendarGateway:
    """
    Thin Google Calendar v3 client bound to a single calendar.

    Responsibilities
    ----------------
    - Provide a valid access token, refreshing it from the installed refresh
      token when missing or expired (and re-installing the result).
    - List events in a time window and insert events.
    - Translate provider failures into `CalendarAuthError` /
      `CalendarProviderError`.
    """

    def __init__(
        self,
        store: CredentialStore,
        oauth: GoogleOAuthClient,
        base_url: str = "https://www.googleapis.com/calendar/v3",
        calendar_id: str = "primary",
        timeout_seconds: float = 10.0,
    ) -> None:
        self._store = store
        self._oauth = oauth
        self._base_url = base_url.rstrip("/")
        self._calendar_id = calendar_id
        self._timeout_seconds = timeout_seconds

    @property
    def events_path(self) -> str:
        return f"/calendars/{quote(self._calendar_id, safe='')}/events"

    async def get_access_token(self) -> str:
        """
        Return a valid access token, refreshing it when needed.
        """
        credentials = self._store.credentials
        if credentials is None or not credentials.is_usable:
            raise CalendarAuthError("No credentials installed.")

        if credentials.access_token_valid():
            return credentials.access_token

        if not credentials.refresh_token:
            raise CalendarAuthError("Access token expired and no refresh token is available.")

        refreshed = await self._oauth.refresh(credentials.refresh_token)
        self._store.install(refreshed)
        return refreshed.access_token

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Dict[str, Any]:
        """
        Issue an authenticated request and return the decoded JSON payload.
        """
        token = await self.get_access_token()
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.request(
                    method=method.upper(),
                    url=url,
                    headers=headers,
                    params=params,
                    json=json,
                )
        except httpx.HTTPError as exc:
            raise CalendarProviderError(f"Calendar {method.upper()} failed: {exc}") from exc

        if resp.status_code // 100 != 2:
            message = f"Calendar {method.upper()} failed (status={resp.status_code}): {resp.text}"
            if resp.status_code == 401 or "invalid_grant" in resp.text:
                raise CalendarAuthError(message)
            raise CalendarProviderError(message)

        return resp.json()

    async def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        time_zone: str,
        *,
        order_by_start: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        List events overlapping [time_min, time_max], recurring events expanded
        into single instances. Follows pagination until exhausted.
        """
        params: Dict[str, Any] = {
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "timeZone": time_zone,
            "singleEvents": "true",
        }
        if order_by_start:
            params["orderBy"] = "startTime"

        events: List[Dict[str, Any]] = []
        while True:
            payload = await self._request("GET", self.events_path, params=params)
            events.extend(payload.get("items", []))
            page_token = payload.get("nextPageToken")
            if not page_token:
                return events
            params = {**params, "pageToken": page_token}

    async def insert_event(
        self,
        event: Dict[str, Any],
        *,
        notify_attendees: bool = True,
        generate_conference_link: bool = True,
    ) -> Dict[str, Any]:
        """
        Create an event. Returns the provider's event resource (with `htmlLink`).
        """
        params: Dict[str, Any] = {"sendUpdates": "all" if notify_attendees else "none"}
        if generate_conference_link:
            params["conferenceDataVersion"] = 1

        created = await self._request("POST", self.events_path, params=params, json=event)
        logger.info("Created calendar event %s", created.get("id"))
        return created


def build_calendar_gateway(store: CredentialStore, settings=None) -> CalendarGateway:
    settings = settings or get_settings()
    return CalendarGateway(
        store=store,
        oauth=build_oauth_client(settings),
        base_url=settings.GOOGLE_CALENDAR_BASE_URL,
        calendar_id=settings.CALENDAR_ID,
        timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
    )
