"""
Calendar utilities for FinForecastLab.

All month arithmetic in the engine goes through these helpers so that the
month window used for aggregation and the month sequence used for projection
agree with each other.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timezone

import numpy as np
from dateutil.relativedelta import relativedelta

MONTH_LABEL_FORMAT = "%b %Y"


def as_datetime(value: date | datetime | str) -> datetime:
    """
    Normalize a date-like value to a datetime.

    Plain dates are promoted to midnight; ISO strings are parsed with
    ``datetime.fromisoformat`` (a trailing ``Z`` is accepted). Offset-aware
    values are converted to naive UTC, the form every month boundary in the
    engine is expressed in.

    Raises:
        ValueError: If the value cannot be interpreted as a date
    """
    if isinstance(value, datetime):
        if value.utcoffset() is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return as_datetime(datetime.fromisoformat(text))
    raise ValueError(f"Not a date: {value!r}")


def start_of_month(moment: date | datetime) -> datetime:
    """Return the first instant of the month containing ``moment``."""
    moment = as_datetime(moment)
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def end_of_month(moment: date | datetime) -> datetime:
    """Return the last representable instant of the month containing ``moment``."""
    moment = as_datetime(moment)
    last_day = calendar.monthrange(moment.year, moment.month)[1]
    return moment.replace(
        day=last_day, hour=23, minute=59, second=59, microsecond=999999
    )


def add_months(moment: date | datetime, months: int) -> datetime:
    """
    Shift ``moment`` by a number of calendar months.

    The day of month is clamped to the target month's length, so
    31 January + 1 month is 28/29 February.
    """
    return as_datetime(moment) + relativedelta(months=months)


def trailing_months(as_of: date | datetime, months: int) -> list[datetime]:
    """
    Return reference dates for ``months`` consecutive months ending at ``as_of``.

    Index 0 is the month of ``as_of`` itself, index 1 the month before, and so
    on, matching the "most recent first" convention of the trend helpers.
    """
    return [add_months(as_of, -i) for i in range(months)]


def month_label(moment: date | datetime) -> str:
    """Human-readable month label, e.g. ``'Oct 2026'``."""
    return as_datetime(moment).strftime(MONTH_LABEL_FORMAT)


def month_range(start: date | datetime, months: int) -> np.ndarray:
    """
    Generate a range of monthly dates starting from a given date.

    **Args:**
        start: The starting date for the range
        months: Number of months to generate

    **Returns:**
        A numpy array of datetime64[M] values representing monthly intervals

    **Example:**
        ```python
        from datetime import date
        from finforecastlab.core.utils import month_range

        dates = month_range(date(2026, 1, 1), 12)
        # ['2026-01' '2026-02' ... '2026-12']
        ```
    """
    s = np.datetime64(as_datetime(start).date(), "M")
    return s + np.arange(months).astype("timedelta64[M]")
