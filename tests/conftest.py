from __future__ import annotations

import copy
from typing import Optional

import pytest

from attendance_calendar.calendars.model import Calendar
from attendance_calendar.calendars.service import CalendarService
from attendance_calendar.core.enums import ATTENDANCE_VALUES


class InMemoryCalendars:
    """Calendar store keyed by (year, month).

    Calendars are deep-copied on the way in and out so a test only observes
    what was actually saved.
    """

    def __init__(self):
        self._by_key: dict[tuple[str, str], Calendar] = {}
        self._id = 0
        self.saves = 0

    def _sorted(self, calendars) -> list[Calendar]:
        items = sorted(calendars, key=lambda c: (c.year, c.month))
        return [copy.deepcopy(c) for c in items]

    def find_one(self, year: str, month: str) -> Optional[Calendar]:
        c = self._by_key.get((year, month))
        return copy.deepcopy(c) if c else None

    def exists(self, year: str, month: str) -> bool:
        return (year, month) in self._by_key

    def delete_one(self, year: str, month: str) -> bool:
        return self._by_key.pop((year, month), None) is not None

    def save(self, calendar: Calendar) -> Calendar:
        self.saves += 1
        if calendar.calendar_id is None:
            existing = self._by_key.get((calendar.year, calendar.month))
            if existing is not None:
                calendar.calendar_id = existing.calendar_id
            else:
                self._id += 1
                calendar.calendar_id = self._id
        self._by_key[(calendar.year, calendar.month)] = copy.deepcopy(calendar)
        return calendar

    def find_all(self):
        return self._sorted(self._by_key.values())

    def find_by_year(self, year: str):
        return self._sorted(c for c in self._by_key.values() if c.year == year)

    def find_by_date_range(self, start_year, start_month, end_year, end_month):
        lo, hi = (start_year, start_month), (end_year, end_month)
        return self._sorted(c for c in self._by_key.values() if lo <= (c.year, c.month) <= hi)

    def find_with_day_type(self, day_type: str):
        return self._sorted(c for c in self._by_key.values() if any(d.type == day_type for d in c.days))

    def find_with_attendance(self, attendance: Optional[str] = None):
        def matches(d) -> bool:
            return d.attendance in ATTENDANCE_VALUES if attendance is None else d.attendance == attendance

        return self._sorted(c for c in self._by_key.values() if any(matches(d) for d in c.days))

    def find_with_mixed_attendance(self):
        return self._sorted(
            c for c in self._by_key.values() if c.office_attendance_count() > 0 and c.wfh_attendance_count() > 0
        )

    def find_with_incomplete_attendance(self):
        return self._sorted(c for c in self._by_key.values() if c.working_days_without_attendance() > 0)

    def find_with_full_attendance(self):
        return self._sorted(c for c in self._by_key.values() if c.working_days_without_attendance() == 0)

    def find_latest(self) -> Optional[Calendar]:
        items = self._sorted(self._by_key.values())
        return items[-1] if items else None

    def find_oldest(self) -> Optional[Calendar]:
        items = self._sorted(self._by_key.values())
        return items[0] if items else None

    def count_days_by_type(self, day_type: str) -> int:
        return sum(1 for c in self._by_key.values() for d in c.days if d.type == day_type)

    def count_days_by_attendance(self, attendance: str) -> int:
        return sum(1 for c in self._by_key.values() for d in c.days if d.attendance == attendance)

    def count_all(self) -> int:
        return len(self._by_key)

    def count_by_year(self, year: str) -> int:
        return sum(1 for c in self._by_key.values() if c.year == year)

    def distinct_years(self):
        return sorted({c.year for c in self._by_key.values()})


@pytest.fixture()
def repo():
    return InMemoryCalendars()


@pytest.fixture()
def service(repo):
    return CalendarService(repo)


@pytest.fixture()
def app(repo, monkeypatch):
    from attendance_calendar.container import build_container_for
    from attendance_calendar.main import create_app

    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=build_container_for(repo))


@pytest.fixture()
def client(app):
    return app.test_client()
