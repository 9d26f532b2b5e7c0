"""Business-rule validation for calendars, owned by the calendar service.

All checks raise ``ValidationError``; none of them touch persistence.
"""

from __future__ import annotations

import re
from typing import Optional

from ..common.datetime_utils import days_in_month
from ..core.constants import MIN_DAY, MONTH_PATTERN, YEAR_PATTERN
from ..core.enums import ATTENDANCE_VALUES, DAY_TYPE_VALUES, DayType
from ..core.exceptions import ValidationError
from .model import Calendar, DayEntry

_YEAR_RE = re.compile(YEAR_PATTERN)
_MONTH_RE = re.compile(MONTH_PATTERN)


def validate_year(year: Optional[str]) -> str:
    if not isinstance(year, str) or not _YEAR_RE.fullmatch(year):
        raise ValidationError("Year must be 4 digits")
    return year


def validate_month(month: Optional[str]) -> str:
    if not isinstance(month, str) or not _MONTH_RE.fullmatch(month):
        raise ValidationError("Month must be 01-12")
    return month


def validate_year_month(year: Optional[str], month: Optional[str]) -> None:
    validate_year(year)
    validate_month(month)


def validate_region(region: Optional[str]) -> str:
    if region is None or not region.strip():
        raise ValidationError("Region code cannot be empty")
    return region.strip()


def parse_day_type(value: Optional[str]) -> str:
    if value is None or str(value) not in DAY_TYPE_VALUES:
        raise ValidationError(
            f"Invalid day type {value!r}. Must be 'working', 'holiday', 'weekend', or 'leave'"
        )
    return str(value)


def parse_attendance(value: Optional[str]) -> Optional[str]:
    """Allowed attendance value or None (None means "no attendance")."""
    if value is None:
        return None
    if str(value) not in ATTENDANCE_VALUES:
        raise ValidationError(f"Invalid attendance type {value!r}. Must be 'wfoffice' or 'wfh'")
    return str(value)


def validate_day_number(day: int, year: str, month: str) -> int:
    last = days_in_month(int(year), int(month))
    if isinstance(day, bool) or not isinstance(day, int) or not (MIN_DAY <= day <= last):
        raise ValidationError(f"Day must be between {MIN_DAY} and {last} for {year}-{month}")
    return day


def validate_attendance_for_type(type: str, attendance: Optional[str]) -> None:
    if attendance is not None and type != DayType.WORKING.value:
        raise ValidationError("Attendance can only be set for working days")


def validate_day_entry(entry: Optional[DayEntry], year: str, month: str) -> None:
    if entry is None:
        raise ValidationError("Day entry cannot be empty")

    validate_day_number(entry.day, year, month)
    parse_day_type(entry.type)
    parse_attendance(entry.attendance)
    validate_attendance_for_type(entry.type, entry.attendance)


def validate_calendar_data(calendar: Optional[Calendar]) -> None:
    """Strict, all-or-nothing check of a submitted calendar."""
    if calendar is None:
        raise ValidationError("Calendar cannot be empty")

    validate_year_month(calendar.year, calendar.month)

    if calendar.days is None:
        raise ValidationError("Calendar days cannot be null")

    seen: set[int] = set()
    for entry in calendar.days:
        validate_day_entry(entry, calendar.year, calendar.month)
        if entry.day in seen:
            raise ValidationError(f"Duplicate day {entry.day} in {calendar.year}-{calendar.month}")
        seen.add(entry.day)
