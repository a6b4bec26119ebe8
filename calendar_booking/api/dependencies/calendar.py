# calendar_booking/api/dependencies/calendar.py
from typing import Optional

from calendar_booking.services.calendar_gateway import CalendarGateway, build_calendar_gateway
from calendar_booking.services.credential_store import CredentialStore, build_credential_store
from calendar_booking.services.google_oauth import GoogleOAuthClient, build_oauth_client

# Process-wide instances wired to app settings
_credential_store: Optional[CredentialStore] = None
_calendar_gateway: Optional[CalendarGateway] = None


def get_credential_store() -> CredentialStore:
    """
    The credential store shared by every request in this process.
    """
    global _credential_store
    if _credential_store is None:
        _credential_store = build_credential_store()
    return _credential_store


def get_calendar_gateway() -> CalendarGateway:
    global _calendar_gateway
    if _calendar_gateway is None:
        _calendar_gateway = build_calendar_gateway(get_credential_store())
    return _calendar_gateway


def get_oauth_client() -> GoogleOAuthClient:
    return build_oauth_client()
