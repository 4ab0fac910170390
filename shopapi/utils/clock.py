# shopapi/utils/clock.py
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current UTC time without tzinfo, the form timestamps are stored in"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(dt: datetime) -> datetime:
    """Convert an aware datetime to naive UTC; naive input is taken as UTC"""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)
