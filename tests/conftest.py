# tests/conftest.py
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

from calendar_booking.api.dependencies import calendar as deps
from calendar_booking.core.config import get_settings
from calendar_booking.main import create_app
from calendar_booking.schemas.credentials import Credentials
from calendar_booking.services.credential_store import CredentialStore


class FakeCalendarGateway:
    """
    Stand-in for CalendarGateway recording every call.

    `events` is returned from list_events; `list_error` / `insert_error`
    are raised instead when set.
    """

    def __init__(self, events: Optional[List[Dict[str, Any]]] = None):
        self.events = events or []
        self.list_error: Optional[Exception] = None
        self.insert_error: Optional[Exception] = None
        self.list_calls: List[Dict[str, Any]] = []
        self.insert_calls: List[Dict[str, Any]] = []

    async def list_events(self, time_min, time_max, time_zone, *, order_by_start=True):
        self.list_calls.append(
            {
                "time_min": time_min,
                "time_max": time_max,
                "time_zone": time_zone,
                "order_by_start": order_by_start,
            }
        )
        if self.list_error is not None:
            raise self.list_error
        return list(self.events)

    async def insert_event(self, event, *, notify_attendees=True, generate_conference_link=True):
        self.insert_calls.append(
            {
                "event": event,
                "notify_attendees": notify_attendees,
                "generate_conference_link": generate_conference_link,
            }
        )
        if self.insert_error is not None:
            raise self.insert_error
        return {"id": "evt-1", "htmlLink": "https://calendar.google.com/event?eid=evt-1"}

    @property
    def call_count(self) -> int:
        return len(self.list_calls) + len(self.insert_calls)


@pytest.fixture(autouse=True)
def _default_settings(monkeypatch):
    """
    Keep tests independent from the developer's environment / .env file.
    """
    for key in ("GOOGLE_REFRESH_TOKEN", "OPERATIONAL_TIMEZONE", "OPERATIONAL_UTC_OFFSET", "BUSY_SLOT_LABEL"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store() -> CredentialStore:
    """
    Store with no sources: nothing can be loaded unless a test installs it.
    """
    return CredentialStore(sources=[])


@pytest.fixture
def authed_store(store) -> CredentialStore:
    store.install(Credentials(access_token="access-123", refresh_token="refresh-123"))
    return store


@pytest.fixture
def gateway() -> FakeCalendarGateway:
    return FakeCalendarGateway()


@pytest.fixture
def client(monkeypatch, store, gateway) -> TestClient:
    """
    TestClient wired to the `store` and `gateway` fixtures.

    Tests that need credentials install them on `store` (or request
    `authed_store`) before issuing requests.
    """
    monkeypatch.setattr(deps, "_credential_store", store)
    monkeypatch.setattr(deps, "_calendar_gateway", gateway)

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
