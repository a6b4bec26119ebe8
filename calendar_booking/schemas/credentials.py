# calendar_booking/schemas/credentials.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class Credentials(BaseModel):
    """
    OAuth2 token set delegated by the calendar owner.

    Opaque to the rest of the service: only the credential store and the
    calendar gateway read or replace it.
    """

    access_token: str | None = Field(None, description="Short-lived bearer token.")
    refresh_token: str | None = Field(None, description="Long-lived token used to mint access tokens.")
    expiry: datetime | None = Field(None, description="UTC instant at which access_token stops being valid.")
    token_type: str | None = None
    scope: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_epoch_millis_expiry(cls, data: Any) -> Any:
        # Token files written by Google's JS client carry `expiry_date` in epoch millis.
        if isinstance(data, dict) and "expiry" not in data and data.get("expiry_date"):
            data = dict(data)
            millis = data.pop("expiry_date")
            if isinstance(millis, bool) or not isinstance(millis, (int, float)):
                raise ValueError(f"expiry_date must be epoch milliseconds, got {millis!r}")
            try:
                data["expiry"] = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
            except (TypeError, OverflowError, OSError) as exc:
                raise ValueError(f"expiry_date out of range: {millis!r}") from exc
        return data

    @field_validator("expiry")
    @classmethod
    def _naive_expiry_is_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def is_usable(self) -> bool:
        return bool(self.access_token or self.refresh_token)

    def access_token_valid(self, now: datetime | None = None) -> bool:
        """
        True when an access token is present and not yet expired.

        A token without a known expiry is trusted until the provider rejects it.
        """
        if not self.access_token:
            return False
        if self.expiry is None:
            return True
        now = now or datetime.now(tz=timezone.utc)
        return self.expiry > now
