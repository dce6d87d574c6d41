"""Period tokens accepted by /past and /br, and the window each one covers."""

from datetime import datetime
from enum import Enum

from src.wl_common.datetime_utils import days_in_month

DEFAULT_WINDOW_DAYS = 365


class Period(str, Enum):
    DAY = "1d"
    WEEK = "1w"
    MONTH = "1m"
    YEAR = "1y"


_ALIASES = {"1yr": Period.YEAR}


def parse_period(token: str | None) -> Period | None:
    """Return the Period for a token, or None when it is missing or unrecognized."""
    if not token:
        return None
    token = token.strip().lower()
    if token in _ALIASES:
        return _ALIASES[token]
    try:
        return Period(token)
    except ValueError:
        return None


def resolve_window_days(token: str | None, now: datetime) -> int:
    period = parse_period(token)
    if period is Period.DAY:
        return 1
    if period is Period.WEEK:
        return 7
    if period is Period.MONTH:
        return days_in_month(now)
    return DEFAULT_WINDOW_DAYS


def period_label(token: str | None) -> str:
    period = parse_period(token)
    return period.value if period is not None else Period.YEAR.value
