"""Time helpers for rightnow.

Timestamps are naive UTC throughout; a time zone is only consulted to find
calendar-day boundaries.
"""

from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Current time as naive UTC."""
    return datetime.utcnow()


def to_naive_utc(value: datetime) -> datetime:
    """Drop tzinfo after converting to UTC (naive values pass through)."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def align_to(reference: datetime, value: datetime) -> datetime:
    """Make `value` comparable with `reference` (naive values are UTC)."""
    if reference.tzinfo is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    if reference.tzinfo is None and value.tzinfo is not None:
        return to_naive_utc(value)
    return value


def to_local(now: datetime, time_zone: str) -> datetime:
    """Convert a timestamp (naive values are UTC) to the given zone."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(time_zone))


def local_today(now: Optional[datetime] = None, time_zone: str = "UTC") -> date:
    """Calendar date of `now` in the given zone."""
    return to_local(now or utc_now(), time_zone).date()


def end_of_day(now: Optional[datetime] = None, time_zone: str = "UTC") -> datetime:
    """Last instant of `now`'s calendar day in the given zone, as naive UTC."""
    local_now = to_local(now or utc_now(), time_zone)
    local_end = datetime.combine(local_now.date(), time.max, tzinfo=local_now.tzinfo)
    return to_naive_utc(local_end)
