# calendar_booking/services/calendar_errors.py


class CalendarGatewayError(RuntimeError):
    """
    Raised when a call to the calendar provider (or its token endpoint)
    fails in a non-recoverable way.
    """


class CalendarAuthError(CalendarGatewayError):
    """
    The provider rejected the credentials (HTTP 401 / `invalid_grant`),
    or none are available.
    """


class CalendarProviderError(CalendarGatewayError):
    """
    Any other provider-side or transport failure.
    """
