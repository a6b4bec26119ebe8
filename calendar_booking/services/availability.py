# calendar_booking/services/availability.py
from __future__ import annotations

import logging
from typing import List

import pytz

from calendar_booking.core.config import get_settings
from calendar_booking.core.errors import AuthRequiredError, ProviderError, ValidationError
from calendar_booking.schemas.booking import BusySlot
from calendar_booking.services.calendar_errors import CalendarGatewayError
from calendar_booking.services.calendar_gateway import CalendarGateway
from calendar_booking.services.credential_store import CredentialStore
from calendar_booking.services.time_utils import day_window, parse_event_time, parse_requested_day

logger = logging.getLogger(__name__)

AUTH_REQUIRED_MESSAGE = "Backend not authenticated. Please visit /auth"


async def get_busy_slots(
    store: CredentialStore,
    gateway: CalendarGateway,
    requested_date: str | None,
) -> List[BusySlot]:
    """
    Compute the busy intervals of a calendar day.

    Behavior
    --------
    - The day window is [00:00:00.000, 23:59:59.999] in the operational timezone.
    - Every event becomes a slot with the same placeholder summary; real titles
      are never returned.
    - Slot bounds are expressed in the operational timezone and clipped to the
      window, so events spilling over midnight (or all-day events) stay inside it.

    Raises
    ------
    ValidationError:
        `requested_date` missing or unparsable.
    AuthRequiredError:
        No credentials could be installed.
    ProviderError:
        The calendar provider call failed.
    """
    if not requested_date:
        raise ValidationError("Missing required query parameter: date")

    settings = get_settings()
    tz = pytz.timezone(settings.OPERATIONAL_TIMEZONE)

    try:
        day = parse_requested_day(requested_date, tz)
    except ValueError:
        raise ValidationError(f"Invalid date: {requested_date}") from None

    if not store.ensure_loaded():
        raise AuthRequiredError(AUTH_REQUIRED_MESSAGE)

    window_start, window_end = day_window(day, tz)
    logger.info(
        "Checking availability for %s (%s - %s)",
        requested_date,
        window_start.isoformat(),
        window_end.isoformat(),
    )

    try:
        events = await gateway.list_events(window_start, window_end, settings.OPERATIONAL_TIMEZONE)
    except CalendarGatewayError as exc:
        logger.error("Availability lookup failed: %s", exc)
        raise ProviderError(f"Error checking availability: {exc}") from exc

    slots: List[BusySlot] = []
    for event in events:
        try:
            start = parse_event_time(event.get("start", {}), tz)
            end = parse_event_time(event.get("end", {}), tz)
        except ValueError as exc:
            logger.warning("Skipping event %s with unparsable time: %s", event.get("id"), exc)
            continue
        if start is None or end is None:
            continue

        start = max(start, window_start)
        end = min(end, window_end)
        if end < start:
            continue

        slots.append(BusySlot(start=start, end=end, summary=settings.BUSY_SLOT_LABEL))

    return slots
