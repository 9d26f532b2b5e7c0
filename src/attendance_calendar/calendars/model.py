from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_REGION, DEFAULT_TEMPLATE_VERSION
from ..core.enums import Attendance, DayType

logger = logging.getLogger(__name__)

WORKING = DayType.WORKING.value


@dataclass
class DayEntry:
    """Thực thể miền (domain): one day of a monthly calendar.

    ``original_type`` / ``original_attendance`` are snapshotted at construction
    and never touched by Calendar operations afterwards.
    """

    day: int
    type: str
    attendance: Optional[str] = None
    is_updated: bool = False
    original_type: Optional[str] = None
    original_attendance: Optional[str] = None
    last_updated: Optional[datetime] = None
    updated_by: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.original_type is None:
            self.original_type = self.type
            self.original_attendance = self.attendance

    @property
    def is_working(self) -> bool:
        return self.type == WORKING

    def _touch(self, updated_by: Optional[str]) -> None:
        self.is_updated = True
        self.last_updated = now_local()
        if updated_by:
            self.updated_by = updated_by


@dataclass
class Calendar:
    """Aggregate root: one year-month of day entries.

    Day entries must only be mutated through the methods below so the
    attendance-on-working-days rule and the ``is_updated`` tracking hold.
    Statistics are recomputed from ``days`` on every call.
    """

    year: str
    month: str
    days: List[DayEntry] = field(default_factory=list)
    template_id: Optional[str] = None
    template_version: str = DEFAULT_TEMPLATE_VERSION
    region: str = DEFAULT_REGION
    organization_id: Optional[str] = None
    calendar_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.region:
            self.region = DEFAULT_REGION
        if not self.template_version:
            self.template_version = DEFAULT_TEMPLATE_VERSION

    @property
    def key(self) -> str:
        return f"{self.year}-{self.month}"

    # ===== Day access / mutation =====

    def get_day_entry(self, day: int) -> Optional[DayEntry]:
        for entry in self.days:
            if entry.day == day:
                return entry
        return None

    def add_day_entry(self, entry: Optional[DayEntry]) -> None:
        """Insert ``entry``, replacing any existing entry for the same day."""
        if entry is None:
            logger.warning("Ignoring empty day entry for calendar %s", self.key)
            return

        self.days = [d for d in self.days if d.day != entry.day]
        self.days.append(entry)
        logger.debug("Added day entry %s to calendar %s", entry.day, self.key)

    def replace_days(self, days: List[DayEntry]) -> None:
        """Full replacement of the day list (entries are taken as submitted)."""
        self.days = list(days)

    def update_attendance(self, day: int, attendance: Optional[str], *, updated_by: Optional[str] = None) -> bool:
        """Set (or clear, with ``None``) attendance on a working day.

        Returns False when the day is missing or is not a working day.
        """
        entry = self.get_day_entry(day)
        if entry is None:
            logger.warning("Day %s not found in calendar %s", day, self.key)
            return False

        if not entry.is_working:
            logger.warning("Cannot set attendance for non-working day %s in %s", day, self.key)
            return False

        if attendance != entry.attendance:
            entry.attendance = attendance
            entry._touch(updated_by)
            logger.debug("Attendance for %s-%02d set to %s", self.key, day, attendance)

        return True

    def update_day_type(self, day: int, type: str, *, updated_by: Optional[str] = None) -> bool:
        entry = self.get_day_entry(day)
        if entry is None:
            logger.warning("Day %s not found in calendar %s", day, self.key)
            return False

        if type != entry.type:
            entry.type = type
            entry._touch(updated_by)
            logger.debug("Day type for %s-%02d set to %s", self.key, day, type)

        # A non-working day never carries attendance.
        if not entry.is_working:
            entry.attendance = None

        return True

    def update_day_status(
        self,
        day: int,
        type: Optional[str],
        attendance: Optional[str],
        description: Optional[str],
        *,
        updated_by: Optional[str] = None,
    ) -> bool:
        """Combined update: type first, then attendance, then description.

        Attendance is applied only when the resulting type is working; any
        other resulting type clears it. Description is overwritten whenever
        given and is not dirty-tracked.
        """
        entry = self.get_day_entry(day)
        if entry is None:
            logger.warning("Day %s not found in calendar %s", day, self.key)
            return False

        if type is not None and type != entry.type:
            entry.type = type
            entry._touch(updated_by)

        if entry.is_working:
            if attendance is not None and attendance != entry.attendance:
                entry.attendance = attendance
                entry._touch(updated_by)
        else:
            entry.attendance = None

        if description is not None:
            entry.description = description

        return True

    # ===== Statistics =====

    def _count(self, predicate: Callable[[DayEntry], bool]) -> int:
        return sum(1 for d in self.days if predicate(d))

    def working_days_count(self) -> int:
        return self._count(lambda d: d.type == WORKING)

    def holidays_count(self) -> int:
        return self._count(lambda d: d.type == DayType.HOLIDAY.value)

    def weekends_count(self) -> int:
        return self._count(lambda d: d.type == DayType.WEEKEND.value)

    def leave_days_count(self) -> int:
        return self._count(lambda d: d.type == DayType.LEAVE.value)

    def office_attendance_count(self) -> int:
        return self._count(lambda d: d.attendance == Attendance.OFFICE.value)

    def wfh_attendance_count(self) -> int:
        return self._count(lambda d: d.attendance == Attendance.WFH.value)

    def attendance_days_count(self) -> int:
        return self._count(lambda d: d.attendance is not None)

    def working_days_without_attendance(self) -> int:
        return self._count(lambda d: d.type == WORKING and d.attendance is None)

    def updated_days_count(self) -> int:
        return self._count(lambda d: bool(d.is_updated))

    def attendance_rate(self) -> float:
        """Share of working days that have attendance recorded."""
        working = self.working_days_count()
        if working == 0:
            return 0.0
        return self.attendance_days_count() / working

    def office_attendance_rate(self) -> float:
        """Share of recorded attendance that was in the office (not of working days)."""
        recorded = self.attendance_days_count()
        if recorded == 0:
            return 0.0
        return self.office_attendance_count() / recorded

    def wfh_attendance_rate(self) -> float:
        """Share of recorded attendance that was remote (not of working days)."""
        recorded = self.attendance_days_count()
        if recorded == 0:
            return 0.0
        return self.wfh_attendance_count() / recorded
