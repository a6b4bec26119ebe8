# calendar_booking/core/errors.py
from http import HTTPStatus


class ApiError(Exception):
    """
    Base class for failures surfaced to API callers.

    Each subclass fixes the HTTP status; the message is human-readable and is
    rendered as `{"success": false, "message": ...}` by the app's exception
    handler.
    """

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    """Missing or malformed input."""

    status_code = HTTPStatus.BAD_REQUEST


class AuthRequiredError(ApiError):
    """No usable credentials installed; operator must authorize via /auth."""

    status_code = HTTPStatus.UNAUTHORIZED


class AuthExpiredError(ApiError):
    """The provider rejected the installed credentials."""

    status_code = HTTPStatus.UNAUTHORIZED


class ConflictError(ApiError):
    """The requested slot already holds an event."""

    status_code = HTTPStatus.CONFLICT


class ProviderError(ApiError):
    """Any other upstream calendar failure."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR
