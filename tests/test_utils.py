"""Tests for day keys, formatting and weight parsing."""

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from exceptions import InvalidWeightInput
from utils.day_key import as_local, day_key, same_day
from utils.time_format import format_hour_of_day, format_remaining
from utils.weight_input import parse_weight
from tests.conftest import at

TOKYO = ZoneInfo("Asia/Tokyo")


class TestDayKey:
    def test_uses_configured_zone(self, tz):
        late_utc = at(2024, 3, 14, 20)

        assert day_key(late_utc, tz) == date(2024, 3, 14).toordinal()
        assert day_key(late_utc, TOKYO) == date(2024, 3, 15).toordinal()

    def test_same_day(self, tz):
        assert same_day(at(2024, 3, 14, 0), at(2024, 3, 14, 23, 59), tz)
        assert not same_day(at(2024, 3, 14, 23, 59), at(2024, 3, 15), tz)
        assert same_day(date(2024, 3, 14), at(2024, 3, 14, 12), tz)

    def test_naive_datetime_is_local(self):
        assert day_key(datetime(2024, 3, 14, 23), TOKYO) == date(2024, 3, 14).toordinal()

    def test_as_local_attaches_zone_to_naive(self, tz):
        assert as_local(datetime(2024, 3, 14, 8), tz) == at(2024, 3, 14, 8)
        assert as_local(at(2024, 3, 14, 8), TOKYO) == at(2024, 3, 14, 8)
        assert as_local(at(2024, 3, 14, 8), TOKYO).tzinfo is not TOKYO


class TestFormatting:
    @pytest.mark.parametrize(
        "remaining, text",
        [
            (timedelta(hours=16), "16:00:00"),
            (timedelta(hours=1, minutes=2, seconds=3), "01:02:03"),
            (timedelta(0), "00:00:00"),
            (timedelta(seconds=-5), "00:00:00"),
        ],
    )
    def test_format_remaining(self, remaining, text):
        assert format_remaining(remaining) == text

    def test_format_hour(self):
        assert format_hour_of_day(9) == "09:00"


class TestParseWeight:
    def test_valid(self):
        assert parse_weight(" 68.5 ") == 68.5

    def test_invalid(self):
        with pytest.raises(InvalidWeightInput) as excinfo:
            parse_weight("68,5kg")
        assert excinfo.value.raw_value == "68,5kg"
