# tests/test_time_utils.py
from datetime import date, datetime, timedelta

import pytest
import pytz

from calendar_booking.services.time_utils import (
    day_window,
    naive_to_operational,
    parse_aware_datetime,
    parse_event_time,
    parse_requested_day,
)

SAO_PAULO = pytz.timezone("America/Sao_Paulo")


def test_naive_datetime_gets_operational_offset():
    assert naive_to_operational("2026-01-10T14:00:00", "-03:00") == "2026-01-10T14:00:00-03:00"


@pytest.mark.parametrize(
    "value",
    [
        "2026-01-10T14:00:00Z",
        "2026-01-10T14:00:00+00:00",
        "2026-01-10T14:00:00-03:00",
        "2026-01-10T14:00",
        "2026-01-10",
    ],
)
def test_other_shapes_are_left_untouched(value):
    assert naive_to_operational(value, "-03:00") == value


def test_normalized_value_is_not_read_as_utc():
    parsed = parse_aware_datetime(naive_to_operational("2026-01-10T14:00:00", "-03:00"), SAO_PAULO)

    assert parsed.utcoffset() == timedelta(hours=-3)
    assert parsed.astimezone(pytz.utc).hour == 17


def test_parse_requested_day_accepts_date_and_datetime():
    assert parse_requested_day("2025-12-25", SAO_PAULO) == date(2025, 12, 25)
    # 01:30 UTC is still the previous evening in Sao Paulo.
    assert parse_requested_day("2025-12-26T01:30:00Z", SAO_PAULO) == date(2025, 12, 25)


def test_parse_requested_day_rejects_garbage():
    with pytest.raises(ValueError):
        parse_requested_day("not-a-date", SAO_PAULO)


def test_day_window_bounds():
    start, end = day_window(date(2026, 1, 10), SAO_PAULO)

    assert start.isoformat() == "2026-01-10T00:00:00-03:00"
    assert end.isoformat() == "2026-01-10T23:59:59.999000-03:00"


def test_parse_event_time_converts_foreign_timezone():
    parsed = parse_event_time({"dateTime": "2026-01-10T12:00:00Z"}, SAO_PAULO)

    assert parsed.isoformat() == "2026-01-10T09:00:00-03:00"


def test_parse_event_time_uses_event_timezone_for_naive_values():
    parsed = parse_event_time(
        {"dateTime": "2026-01-10T12:00:00", "timeZone": "Europe/Lisbon"},
        SAO_PAULO,
    )

    assert parsed.isoformat() == "2026-01-10T09:00:00-03:00"


def test_parse_event_time_all_day_event_starts_at_midnight():
    parsed = parse_event_time({"date": "2026-01-10"}, SAO_PAULO)

    assert parsed == SAO_PAULO.localize(datetime(2026, 1, 10))


def test_parse_event_time_returns_none_without_time():
    assert parse_event_time({}, SAO_PAULO) is None
