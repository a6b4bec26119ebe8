# calendar_booking/api/routes/health.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from calendar_booking.api.dependencies.calendar import get_credential_store
from calendar_booking.core.config import get_settings
from calendar_booking.services.credential_store import CredentialStore


router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """
    Response schema for the health check endpoint.
    """

    status: str = Field(..., examples=["ok"])
    app_name: str = Field(..., examples=["Calendar Booking API"])
    environment: str = Field(..., description="local/dev/stage/prod", examples=["local"])
    authenticated: bool = Field(
        ...,
        description="Whether calendar credentials are currently installed.",
    )
    timestamp_utc: datetime = Field(..., examples=["2026-01-01T10:30:00Z"])


@router.get("/", response_class=PlainTextResponse, summary="Liveness probe")
async def root() -> str:
    return f"{get_settings().APP_NAME} is running."


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description=(
        "Lightweight endpoint reporting service status and whether calendar "
        "credentials are installed. Never calls the calendar provider."
    ),
)
async def health_check(
    store: CredentialStore = Depends(get_credential_store),
) -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="ok",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        authenticated=store.has_credentials,
        timestamp_utc=datetime.now(tz=timezone.utc),
    )
