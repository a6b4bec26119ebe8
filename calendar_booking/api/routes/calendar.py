# calendar_booking/api/routes/calendar.py
from fastapi import APIRouter, Depends, Query

from calendar_booking.api.dependencies.calendar import get_calendar_gateway, get_credential_store
from calendar_booking.schemas.booking import (
    AvailabilityResponse,
    ErrorResponse,
    ScheduleRequest,
    ScheduleResponse,
)
from calendar_booking.services.availability import get_busy_slots
from calendar_booking.services.calendar_gateway import CalendarGateway
from calendar_booking.services.credential_store import CredentialStore
from calendar_booking.services.scheduling import BOOKED_MESSAGE, schedule_booking

router = APIRouter(prefix="/api", tags=["Calendar"])


@router.get(
    "/availability",
    response_model=AvailabilityResponse,
    summary="Busy slots for a calendar day",
    description=(
        "Lists the busy intervals of the given day in the operational timezone.\n\n"
        "Every slot carries the same placeholder summary; event titles are "
        "never returned."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "slots": [
                            {
                                "start": "2026-01-10T14:00:00-03:00",
                                "end": "2026-01-10T15:00:00-03:00",
                                "summary": "Busy",
                            }
                        ],
                    }
                }
            },
        },
        400: {"model": ErrorResponse, "description": "Missing or invalid `date`."},
        401: {"model": ErrorResponse, "description": "Backend not authenticated."},
        500: {"model": ErrorResponse, "description": "Calendar provider failure."},
    },
)
async def availability(
    date: str | None = Query(
        default=None,
        description="Day to inspect (YYYY-MM-DD or ISO date-time).",
        examples=["2026-01-10"],
    ),
    store: CredentialStore = Depends(get_credential_store),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
) -> AvailabilityResponse:
    slots = await get_busy_slots(store, gateway, date)
    return AvailabilityResponse(success=True, slots=slots)


@router.post(
    "/schedule",
    response_model=ScheduleResponse,
    summary="Book a one-hour meeting",
    description=(
        "Validates the request, refuses slots that already hold an event, then "
        "creates a one-hour event with the requester as attendee, email and "
        "popup reminders and a generated Meet link."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Missing name, email or date."},
        401: {"model": ErrorResponse, "description": "Not authenticated or authentication expired."},
        409: {"model": ErrorResponse, "description": "Slot already booked."},
        500: {"model": ErrorResponse, "description": "Calendar provider failure."},
    },
)
async def schedule(
    payload: ScheduleRequest,
    store: CredentialStore = Depends(get_credential_store),
    gateway: CalendarGateway = Depends(get_calendar_gateway),
) -> ScheduleResponse:
    link = await schedule_booking(store, gateway, payload)
    return ScheduleResponse(success=True, message=BOOKED_MESSAGE, link=link)
