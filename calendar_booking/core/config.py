# calendar_booking/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables (or a local `.env` file)
    at runtime and cover:
    - Google OAuth2 client credentials and the delegated refresh token
    - Calendar identity and the operational timezone
    - Booking defaults (duration, title, busy label)
    - HTTP server / CORS settings
    """

    APP_NAME: str = "Calendar Booking API"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")
    PORT: int = Field(3001, description="Port the HTTP server listens on.")
    LOG_LEVEL: str = Field("INFO", description="Root logging level.")

    # --- Google OAuth2 ---
    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None
    GOOGLE_REDIRECT_URI: str | None = Field(
        default=None,
        description=(
            "OAuth redirect URI registered with Google. "
            "Defaults to http://localhost:<PORT>/auth/callback."
        ),
    )
    GOOGLE_REFRESH_TOKEN: str | None = Field(
        default=None,
        description=(
            "Long-lived refresh token supplied by the operator. "
            "Takes precedence over the local token file."
        ),
    )
    GOOGLE_SCOPES: str = "https://www.googleapis.com/auth/calendar.events"
    GOOGLE_AUTH_URL: str = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
    GOOGLE_CALENDAR_BASE_URL: str = "https://www.googleapis.com/calendar/v3"

    # --- Calendar / booking ---
    CALENDAR_ID: str = Field("primary", description="Calendar queried and written to.")
    TOKEN_PATH: str = Field(
        "tokens.json",
        description="Local JSON file where tokens are persisted in development.",
    )
    OPERATIONAL_TIMEZONE: str = Field(
        "America/Sao_Paulo",
        description="Timezone used for day boundaries and event times.",
    )
    OPERATIONAL_UTC_OFFSET: str = Field(
        "-03:00",
        description="Offset appended to naive booking times.",
    )
    BOOKING_DURATION_MINUTES: int = 60
    BOOKING_TITLE: str = "Demo Playlix"
    BUSY_SLOT_LABEL: str = Field(
        "Busy",
        description="Placeholder summary returned for every busy slot.",
    )

    # --- HTTP ---
    CORS_ALLOW_ORIGINS: str = Field(
        "*",
        description="Comma-separated list of allowed CORS origins.",
    )
    HTTP_TIMEOUT_SECONDS: float = 10.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def redirect_uri(self) -> str:
        return self.GOOGLE_REDIRECT_URI or f"http://localhost:{self.PORT}/auth/callback"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
