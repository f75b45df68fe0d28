from __future__ import annotations

from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


# PUBLIC_INTERFACE
def to_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to timezone-aware UTC with millisecond precision.

    Naive datetimes are taken to already be in UTC. Sub-millisecond digits are
    dropped so values compare equal after a round trip through the store.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


# PUBLIC_INTERFACE
def utcnow() -> datetime:
    """Current time as an aware UTC datetime truncated to milliseconds."""
    return to_utc(datetime.now(timezone.utc))


# PUBLIC_INTERFACE
def to_epoch_millis(value: datetime) -> int:
    """Convert a datetime into integer milliseconds since the Unix epoch."""
    return (to_utc(value) - EPOCH) // _ONE_MS


# PUBLIC_INTERFACE
def from_epoch_millis(value: float) -> datetime:
    """Convert milliseconds since the Unix epoch into an aware UTC datetime."""
    return to_utc(EPOCH + timedelta(milliseconds=value))
