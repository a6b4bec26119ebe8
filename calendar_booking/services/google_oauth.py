# calendar_booking/services/google_oauth.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from calendar_booking.core.config import get_settings
from calendar_booking.schemas.credentials import Credentials
from calendar_booking.services.calendar_errors import (
    CalendarAuthError,
    CalendarProviderError,
)

# Refresh slightly before the real expiry.
EXPIRY_SAFETY_MARGIN_SECONDS = 60


class GoogleOAuthClient:
    """
    Minimal Google OAuth2 client for the authorization-code flow.

    Responsibilities
    ----------------
    - Build the consent URL (offline access, forced consent so a refresh
      token is always returned).
    - Exchange an authorization code for tokens.
    - Mint a fresh access token from a refresh token.
    """

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str,
        scope: str = "https://www.googleapis.com/auth/calendar.events",
        auth_url: str = "https://accounts.google.com/o/oauth2/v2/auth",
        token_url: str = "https://oauth2.googleapis.com/token",
        timeout_seconds: float = 10.0,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._scope = scope
        self._auth_url = auth_url
        self._token_url = token_url
        self._timeout_seconds = timeout_seconds

    def _require_client(self) -> None:
        if not self._client_id or not self._client_secret:
            raise CalendarAuthError(
                "GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be configured."
            )

    def authorization_url(self, state: Optional[str] = None) -> str:
        """
        Returns the provider consent URL the operator is redirected to.
        """
        params = {
            "client_id": self._client_id or "",
            "redirect_uri": self._redirect_uri,
            "response_type": "code",
            "scope": self._scope,
            "access_type": "offline",
            "prompt": "consent",
        }
        if state:
            params["state"] = state
        return f"{self._auth_url}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> Credentials:
        """
        Exchange an authorization code for an access/refresh token pair.
        """
        return await self._token_request(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self._redirect_uri,
            }
        )

    async def refresh(self, refresh_token: str) -> Credentials:
        """
        Obtain a new access token. The provider usually omits the refresh
        token from this response, so the one passed in is kept.
        """
        credentials = await self._token_request(
            {"grant_type": "refresh_token", "refresh_token": refresh_token}
        )
        if not credentials.refresh_token:
            credentials = credentials.model_copy(update={"refresh_token": refresh_token})
        return credentials

    async def _token_request(self, data: Dict[str, Any]) -> Credentials:
        self._require_client()
        data = {
            **data,
            "client_id": self._client_id,
            "client_secret": self._client_secret,
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                resp = await client.post(self._token_url, data=data)
        except httpx.HTTPError as exc:
            raise CalendarProviderError(f"Token endpoint unreachable: {exc}") from exc

        if resp.status_code != 200:
            message = f"Failed to obtain Google token (status={resp.status_code}): {resp.text}"
            if resp.status_code == 401 or "invalid_grant" in resp.text:
                raise CalendarAuthError(message)
            raise CalendarProviderError(message)

        payload = resp.json()
        access_token = payload.get("access_token")
        if not access_token:
            raise CalendarProviderError("Invalid token response from Google (missing access_token)")

        expiry = None
        expires_in = payload.get("expires_in")
        if isinstance(expires_in, (int, float)):
            now = datetime.now(tz=timezone.utc)
            expiry = now + timedelta(seconds=float(expires_in) - EXPIRY_SAFETY_MARGIN_SECONDS)

        return Credentials(
            access_token=access_token,
            refresh_token=payload.get("refresh_token"),
            expiry=expiry,
            token_type=payload.get("token_type"),
            scope=payload.get("scope"),
        )


def build_oauth_client(settings=None) -> GoogleOAuthClient:
    settings = settings or get_settings()
    return GoogleOAuthClient(
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        redirect_uri=settings.redirect_uri,
        scope=settings.GOOGLE_SCOPES,
        auth_url=settings.GOOGLE_AUTH_URL,
        token_url=settings.GOOGLE_TOKEN_URL,
        timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
    )
