from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Calendar


class CalendarRepository(Protocol):
    """Persistence capabilities the calendar service relies on.

    List results are ordered by (year, month). At most one calendar exists per
    (year, month).
    """

    def find_one(self, year: str, month: str) -> Optional[Calendar]:
        raise NotImplementedError

    def exists(self, year: str, month: str) -> bool:
        raise NotImplementedError

    def delete_one(self, year: str, month: str) -> bool:
        raise NotImplementedError

    def save(self, calendar: Calendar) -> Calendar:
        """Insert or replace the calendar for its (year, month).

        Returns the stored calendar with ``calendar_id`` set.
        """

        raise NotImplementedError

    def find_all(self) -> Sequence[Calendar]:
        raise NotImplementedError

    def find_by_year(self, year: str) -> Sequence[Calendar]:
        raise NotImplementedError

    def find_by_date_range(self, start_year: str, start_month: str, end_year: str, end_month: str) -> Sequence[Calendar]:
        """Calendars between (start_year, start_month) and (end_year, end_month), inclusive."""

        raise NotImplementedError

    def find_with_day_type(self, day_type: str) -> Sequence[Calendar]:
        raise NotImplementedError

    def find_with_attendance(self, attendance: Optional[str] = None) -> Sequence[Calendar]:
        """Calendars with at least one day carrying ``attendance`` (any value when None)."""

        raise NotImplementedError

    def find_with_mixed_attendance(self) -> Sequence[Calendar]:
        raise NotImplementedError

    def find_with_incomplete_attendance(self) -> Sequence[Calendar]:
        """Calendars with at least one working day lacking attendance."""

        raise NotImplementedError

    def find_with_full_attendance(self) -> Sequence[Calendar]:
        raise NotImplementedError

    def find_latest(self) -> Optional[Calendar]:
        raise NotImplementedError

    def find_oldest(self) -> Optional[Calendar]:
        raise NotImplementedError

    def count_days_by_type(self, day_type: str) -> int:
        raise NotImplementedError

    def count_days_by_attendance(self, attendance: str) -> int:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def count_by_year(self, year: str) -> int:
        raise NotImplementedError

    def distinct_years(self) -> Sequence[str]:
        raise NotImplementedError
