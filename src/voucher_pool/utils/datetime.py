"""Date-time helpers; timestamps are persisted as naive UTC."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time without tzinfo."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Normalise a timestamp to naive UTC; naive input is assumed to be UTC already."""

    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
