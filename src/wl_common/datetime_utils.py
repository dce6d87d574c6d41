"""UTC datetime utilities."""

import calendar
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def days_in_month(moment: datetime) -> int:
    """Number of days in the calendar month containing `moment`."""
    return calendar.monthrange(moment.year, moment.month)[1]


def window_start(now: datetime, days: int) -> datetime:
    """Lower bound (inclusive) of a trailing window of `days` days ending at `now`."""
    return now - timedelta(days=days)
