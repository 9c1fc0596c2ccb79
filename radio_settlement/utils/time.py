"""Time utilities (UTC now, Sunday-aligned week keys)."""
from __future__ import annotations
from datetime import date, datetime, timezone, timedelta

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def week_start(moment: datetime) -> date:
    """Most recent Sunday at or before ``moment``, evaluated in UTC.

    Naive datetimes are taken to already be UTC.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    day = moment.date()
    # weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (day.weekday() + 1) % 7
    return day - timedelta(days=days_since_sunday)

__all__ = ["utc_now", "week_start"]
