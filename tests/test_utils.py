"""Tests for time helpers."""
from datetime import datetime, timedelta, timezone

from carrental.utils import rental_days, to_utc_naive, utcnow


def test_to_utc_naive_converts_aware_values() -> None:
    aware = datetime(2030, 1, 10, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    assert to_utc_naive(aware) == datetime(2030, 1, 10, 10, 0)
    assert to_utc_naive(datetime(2030, 1, 10, 12, 0)) == datetime(2030, 1, 10, 12, 0)


def test_utcnow_is_naive() -> None:
    assert utcnow().tzinfo is None


def test_rental_days() -> None:
    start = datetime(2030, 1, 1, 9, 0)

    assert rental_days(start, start + timedelta(days=2)) == 2
    assert rental_days(start, start + timedelta(days=2, seconds=1)) == 3
    assert rental_days(start, start + timedelta(minutes=30)) == 1
