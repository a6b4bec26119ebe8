# calendar_booking/services/time_utils.py
"""
Datetime helpers for the operational timezone.

- naive_to_operational: append the fixed UTC offset to bare local date-times
- parse_requested_day: read the calendar day out of a date or date-time string
- day_window: [00:00:00.000, 23:59:59.999] of a day in the operational timezone
- parse_event_time: read a provider `start`/`end` object
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional

import pytz

NAIVE_DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}$")
END_OF_DAY = time(23, 59, 59, 999000)


def _fromisoformat(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def naive_to_operational(value: str, utc_offset: str) -> str:
    """
    Append `utc_offset` to a bare `YYYY-MM-DDTHH:MM:SS` string.

    Anything else (already offset-qualified, or another shape) is returned as is.
    """
    if NAIVE_DATETIME_PATTERN.match(value):
        return f"{value}{utc_offset}"
    return value


def parse_aware_datetime(value: str, tz: pytz.BaseTzInfo) -> datetime:
    """
    Parse an ISO-8601 date-time; naive results are localized to `tz`.

    Raises ValueError on malformed input.
    """
    dt = _fromisoformat(value)
    if dt.tzinfo is None:
        dt = tz.localize(dt)
    return dt


def parse_requested_day(value: str, tz: pytz.BaseTzInfo) -> date:
    """
    Return the calendar day referred to by `value` in `tz`.

    Accepts `YYYY-MM-DD` or any ISO-8601 date-time. Raises ValueError.
    """
    value = value.strip()
    if len(value) == 10:
        return date.fromisoformat(value)
    return parse_aware_datetime(value, tz).astimezone(tz).date()


def day_window(day: date, tz: pytz.BaseTzInfo) -> tuple[datetime, datetime]:
    start = tz.localize(datetime.combine(day, time.min))
    end = tz.localize(datetime.combine(day, END_OF_DAY))
    return start, end


def parse_event_time(obj: dict, tz: pytz.BaseTzInfo) -> Optional[datetime]:
    """
    Convert a Google Calendar `start`/`end` object into an aware datetime in `tz`.

    All-day events only carry `date`; they start at local midnight.
    """
    if obj.get("dateTime"):
        event_tz = tz
        if obj.get("timeZone"):
            try:
                event_tz = pytz.timezone(obj["timeZone"])
            except pytz.UnknownTimeZoneError:
                event_tz = tz
        return parse_aware_datetime(obj["dateTime"], event_tz).astimezone(tz)
    if obj.get("date"):
        return tz.localize(datetime.combine(date.fromisoformat(obj["date"]), time.min))
    return None
