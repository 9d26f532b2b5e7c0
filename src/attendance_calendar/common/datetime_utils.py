from __future__ import annotations

import calendar
from datetime import date, datetime


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(int(year), int(month))[1]


def iso_weekday(year: int, month: int, day: int) -> int:
    """ISO weekday of a date: Monday=1 ... Sunday=7."""
    return date(int(year), int(month), int(day)).isoweekday()
