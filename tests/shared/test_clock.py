from datetime import UTC, datetime, timedelta, timezone

import pytest
from shared.clock import as_utc, utc_now
from shared.errors import InvalidInput


class TestAsUtc:
    def test_naive_is_taken_as_utc(self):
        assert as_utc(datetime(2024, 1, 1, 9, 30)) == datetime(2024, 1, 1, 9, 30, tzinfo=UTC)

    def test_other_zone_is_converted(self):
        value = datetime(2024, 1, 1, 9, 30, tzinfo=timezone(timedelta(hours=-5)))
        converted = as_utc(value)
        assert converted.tzinfo == UTC
        assert converted.hour == 14

    def test_none_passes_through(self):
        assert as_utc(None) is None

    def test_non_datetime_rejected(self):
        with pytest.raises(InvalidInput):
            as_utc("2024-01-01")


def test_utc_now_is_aware():
    assert utc_now().tzinfo is UTC
