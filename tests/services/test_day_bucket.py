import time
from datetime import datetime, timedelta, timezone

import pytest

from app.services.incentives.daily_metrics_service import parse_day_bucket


def test_parses_to_midnight_utc():
    assert parse_day_bucket("2025-07-09") == datetime(2025, 7, 9, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["2025-07-09", "2025-7-9", " 2025-07-09 ", "2025-07-09T18:45:00", "2025-07-09 23:59:59"])
def test_same_calendar_day_maps_to_same_bucket(value):
    assert parse_day_bucket(value) == datetime(2025, 7, 9, tzinfo=timezone.utc)


def test_month_is_one_based_at_year_boundary():
    new_year = parse_day_bucket("2025-01-01")
    new_years_eve = parse_day_bucket("2024-12-31")

    assert (new_year.year, new_year.month, new_year.day) == (2025, 1, 1)
    assert (new_years_eve.year, new_years_eve.month, new_years_eve.day) == (2024, 12, 31)
    assert new_year - new_years_eve == timedelta(days=1)


def test_bucket_has_no_time_of_day():
    bucket = parse_day_bucket("2025-03-30")
    assert (bucket.hour, bucket.minute, bucket.second, bucket.microsecond) == (0, 0, 0, 0)
    assert bucket.utcoffset() == timedelta(0)


@pytest.mark.skipif(not hasattr(time, "tzset"), reason="requires time.tzset")
@pytest.mark.parametrize("zone", ["Pacific/Kiritimati", "America/Los_Angeles", "UTC"])
def test_bucket_ignores_server_timezone(monkeypatch, zone):
    monkeypatch.setenv("TZ", zone)
    time.tzset()
    try:
        assert parse_day_bucket("2025-07-09") == datetime(2025, 7, 9, tzinfo=timezone.utc)
    finally:
        monkeypatch.undo()
        time.tzset()


@pytest.mark.parametrize("value", ["2025-13-01", "2025-02-30", "July 9 2025", "2025-07", "", "2025-xx-09"])
def test_rejects_impossible_or_malformed_dates(value):
    with pytest.raises(ValueError):
        parse_day_bucket(value)
