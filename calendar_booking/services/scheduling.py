# calendar_booking/services/scheduling.py
from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta

import pytz

from calendar_booking.core.config import get_settings
from calendar_booking.core.errors import (
    AuthExpiredError,
    AuthRequiredError,
    ConflictError,
    ProviderError,
    ValidationError,
)
from calendar_booking.schemas.booking import BookingEvent, ScheduleRequest
from calendar_booking.services.availability import AUTH_REQUIRED_MESSAGE
from calendar_booking.services.calendar_errors import CalendarAuthError, CalendarGatewayError
from calendar_booking.services.calendar_gateway import CalendarGateway
from calendar_booking.services.credential_store import CredentialStore
from calendar_booking.services.time_utils import naive_to_operational, parse_aware_datetime

logger = logging.getLogger(__name__)

BOOKED_MESSAGE = "Event scheduled successfully!"
AUTH_EXPIRED_MESSAGE = "Authentication expired. Admin needs to visit /auth again."
CONFLICT_MESSAGE = "Time slot unavailable! Someone just booked it."


def conference_request_id() -> str:
    """
    Timestamp-derived id so the provider creates a fresh meeting link per booking.
    """
    return f"meet-{int(time.time() * 1000)}"


def build_booking_event(
    name: str,
    email: str,
    start: datetime,
    *,
    title: str,
    time_zone: str,
    duration_minutes: int = 60,
) -> BookingEvent:
    return BookingEvent(
        summary=f"{title}: {name}",
        description=(
            "Interested in a platform demo.\n\n"
            f"Client: {name}\n"
            f"Email: {email}\n"
            "Booked via the scheduling API."
        ),
        start=start,
        end=start + timedelta(minutes=duration_minutes),
        time_zone=time_zone,
        attendee_email=email,
        conference_request_id=conference_request_id(),
    )


async def schedule_booking(
    store: CredentialStore,
    gateway: CalendarGateway,
    request: ScheduleRequest,
) -> str:
    """
    Book a meeting for the requester and return the event's shareable link.

    Pipeline (linear, no retries)
    -----------------------------
    1. Validate that name, email and date are present.
    2. Append the operational offset to naive start times.
    3. Ensure credentials are installed.
    4. Refuse the booking when any event overlaps [start, start + duration].
       The check and the insert are separate provider calls, so two
       concurrent requests for the same slot can both pass it.
    5. Insert the event with attendee notifications and a conference link.

    Raises
    ------
    ValidationError, AuthRequiredError, ConflictError, AuthExpiredError, ProviderError
    """
    name = (request.name or "").strip()
    email = (request.email or "").strip()
    raw_date = (request.date or "").strip()
    if not name or not email or not raw_date:
        raise ValidationError("Missing required fields: name, email, date")

    settings = get_settings()
    tz = pytz.timezone(settings.OPERATIONAL_TIMEZONE)

    normalized = naive_to_operational(raw_date, settings.OPERATIONAL_UTC_OFFSET)
    if normalized != raw_date:
        logger.info(
            "Naive date string %s, forcing %s",
            raw_date,
            settings.OPERATIONAL_UTC_OFFSET,
        )
    try:
        start = parse_aware_datetime(normalized, tz)
    except ValueError:
        raise ValidationError(f"Invalid date: {raw_date}") from None

    if not store.ensure_loaded():
        raise AuthRequiredError(AUTH_REQUIRED_MESSAGE)

    event = build_booking_event(
        name,
        email,
        start,
        title=settings.BOOKING_TITLE,
        time_zone=settings.OPERATIONAL_TIMEZONE,
        duration_minutes=settings.BOOKING_DURATION_MINUTES,
    )

    try:
        existing = await gateway.list_events(
            event.start,
            event.end,
            settings.OPERATIONAL_TIMEZONE,
            order_by_start=False,
        )
        if existing:
            logger.warning("Double booking prevented for %s", event.start.isoformat())
            raise ConflictError(CONFLICT_MESSAGE)

        created = await gateway.insert_event(
            event.to_provider_payload(),
            notify_attendees=True,
            generate_conference_link=True,
        )
    except CalendarGatewayError as exc:
        logger.error("Calendar API error: %s", exc)
        if isinstance(exc, CalendarAuthError) or "invalid_grant" in str(exc):
            raise AuthExpiredError(AUTH_EXPIRED_MESSAGE) from exc
        raise ProviderError(f"Error contacting Google Calendar: {exc}") from exc

    return created.get("htmlLink", "")
