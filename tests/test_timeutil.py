from datetime import datetime, timezone

import pytest

from statusboard.errors import InvalidRequest, InvalidTimeFormat
from statusboard.timeutil import at_minute, format_minutes, minute_of_day, time_of_day, to_minutes


@pytest.mark.parametrize(
    "value, minutes",
    [("00:00", 0), ("09:05", 545), ("18:00", 1080), ("23:59", 1439)],
)
def test_to_minutes(value, minutes):
    assert to_minutes(value) == minutes


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "noon", "", None, "09:00:00"])
def test_to_minutes_rejects_malformed_times(value):
    with pytest.raises(InvalidTimeFormat):
        to_minutes(value)


def test_invalid_time_format_is_an_invalid_request():
    assert issubclass(InvalidTimeFormat, InvalidRequest)


def test_format_minutes_clamps_to_the_day():
    assert format_minutes(545) == "09:05"
    assert format_minutes(1440) == "23:59"
    assert format_minutes(-5) == "00:00"


def test_minute_of_day_rounds_partial_minutes_up():
    assert minute_of_day(datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)) == 600
    assert minute_of_day(datetime(2025, 3, 10, 10, 0, 30, tzinfo=timezone.utc)) == 601


def test_time_of_day_and_at_minute():
    moment = datetime(2025, 3, 10, 7, 4, 59, tzinfo=timezone.utc)
    assert time_of_day(moment) == "07:04"
    assert at_minute(moment, 690) == datetime(2025, 3, 10, 11, 30, tzinfo=timezone.utc)
    assert at_minute(moment, 1440) == datetime(2025, 3, 11, 0, 0, tzinfo=timezone.utc)
