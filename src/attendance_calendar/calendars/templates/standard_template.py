from __future__ import annotations

from typing import Iterable, Optional

from ...common.datetime_utils import days_in_month, iso_weekday
from ...core.constants import DEFAULT_REGION, DEFAULT_TEMPLATE_ID, DEFAULT_TEMPLATE_VERSION
from ...core.enums import DayType
from ..model import Calendar, DayEntry
from .base import CalendarTemplate

_WEEKEND_ISO_DAYS = (6, 7)


class WeekendHolidayTemplate(CalendarTemplate):
    """Listed day numbers are holidays, Saturday/Sunday are weekends, the rest working."""

    def __init__(self, holidays: Iterable[int] = ()):
        self._holidays = frozenset(int(d) for d in holidays)

    def classify(self, year: str, month: str, day: int) -> str:
        if day in self._holidays:
            return DayType.HOLIDAY.value
        if iso_weekday(int(year), int(month), day) in _WEEKEND_ISO_DAYS:
            return DayType.WEEKEND.value
        return DayType.WORKING.value

    def generate_base_calendar(self, year: str, month: str, region: Optional[str] = None) -> Calendar:
        last = days_in_month(int(year), int(month))
        days = [DayEntry(day=d, type=self.classify(year, month, d)) for d in range(1, last + 1)]
        return Calendar(
            year=year,
            month=month,
            days=days,
            template_id=DEFAULT_TEMPLATE_ID,
            template_version=DEFAULT_TEMPLATE_VERSION,
            region=region or DEFAULT_REGION,
        )
