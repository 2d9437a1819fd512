import math
from datetime import datetime, timezone


def utcnow() -> datetime:
    # Timestamps are stored as naive UTC.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def rental_days(start: datetime, end: datetime) -> int:
    diff = end - start
    days = diff.total_seconds() / 86400.0
    return max(1, int(math.ceil(days)))
