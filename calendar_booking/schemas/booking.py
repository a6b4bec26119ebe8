# calendar_booking/schemas/booking.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class BusySlot(BaseModel):
    """
    Read-only projection of a provider event for a single day.

    `summary` is always a placeholder label so other bookings' details are
    never exposed.
    """

    start: datetime = Field(..., description="Slot start in the operational timezone.")
    end: datetime = Field(..., description="Slot end in the operational timezone.")
    summary: str = Field(..., description="Placeholder label.", examples=["Busy"])


class AvailabilityResponse(BaseModel):
    success: bool = True
    slots: list[BusySlot] = Field(default_factory=list)


class ScheduleRequest(BaseModel):
    """
    Booking request body.

    Fields are optional at the schema level so that missing values are
    reported with the service's own 400 envelope instead of a 422.
    """

    name: str | None = Field(None, examples=["Ana"])
    email: str | None = Field(None, examples=["ana@x.com"])
    date: str | None = Field(
        None,
        description="Start time, ISO-8601. Naive values are read in the operational timezone.",
        examples=["2026-01-10T14:00:00"],
    )


class ScheduleResponse(BaseModel):
    success: bool = True
    message: str
    link: str | None = Field(None, description="Shareable link to the created event.")


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class BookingEvent(BaseModel):
    """
    Event composed for a single booking and sent to the provider once.
    """

    model_config = {"frozen": True}

    summary: str
    description: str
    start: datetime
    end: datetime
    time_zone: str
    attendee_email: str
    conference_request_id: str
    reminder_minutes_email: int = 24 * 60
    reminder_minutes_popup: int = 10

    def to_provider_payload(self) -> dict:
        """
        Render the event in the Google Calendar `events.insert` body format.
        """
        return {
            "summary": self.summary,
            "description": self.description,
            "start": {"dateTime": self.start.isoformat(), "timeZone": self.time_zone},
            "end": {"dateTime": self.end.isoformat(), "timeZone": self.time_zone},
            "attendees": [{"email": self.attendee_email}],
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": self.reminder_minutes_email},
                    {"method": "popup", "minutes": self.reminder_minutes_popup},
                ],
            },
            "conferenceData": {
                "createRequest": {
                    "requestId": self.conference_request_id,
                    "conferenceSolutionKey": {"type": "hangoutsMeet"},
                },
            },
        }
