from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import ATTENDANCE_NOT_APPLICABLE, ATTENDANCE_NOT_SET, MAX_DAY, MIN_DAY
from ..core.enums import Attendance, DayType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import Calendar, DayEntry
from .repository import CalendarRepository
from .templates.base import CalendarTemplate
from .templates.standard_template import WeekendHolidayTemplate
from .validation import (
    parse_attendance,
    parse_day_type,
    validate_attendance_for_type,
    validate_calendar_data,
    validate_day_entry,
    validate_region,
    validate_year,
    validate_year_month,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkUpdateResult:
    """Outcome of a bulk update: the saved calendar plus per-day results."""

    calendar: Calendar
    applied: list[int] = field(default_factory=list)
    skipped: dict[int, str] = field(default_factory=dict)


class CalendarService:
    """Use cases over monthly calendars.

    Each call loads what it needs, mutates the aggregate in memory and saves
    it once. Validation errors are raised before anything is saved.
    """

    def __init__(self, calendars: CalendarRepository, *, template: Optional[CalendarTemplate] = None):
        self._calendars = calendars
        self._template = template or WeekendHolidayTemplate()

    def _persist(self, calendar: Calendar) -> Calendar:
        now = now_local()
        if calendar.created_at is None:
            calendar.created_at = now
        calendar.updated_at = now
        return self._calendars.save(calendar)

    def _require_calendar(self, year: str, month: str) -> Calendar:
        calendar = self._calendars.find_one(year, month)
        if calendar is None:
            raise NotFoundError(f"Calendar not found for {year}-{month}")
        return calendar

    @staticmethod
    def _require_day(calendar: Calendar, day: int) -> DayEntry:
        entry = calendar.get_day_entry(day)
        if entry is None:
            raise NotFoundError(f"Day {day} not found in {calendar.year}-{calendar.month}")
        return entry

    # ===== Calendar access =====

    def get_or_create_calendar(self, year: str, month: str, region: Optional[str] = None) -> Calendar:
        """Load the calendar, generating and saving a base one when absent.

        An existing calendar is returned as-is even if its region differs.
        """
        logger.debug("Getting or creating calendar for %s-%s", year, month)
        validate_year_month(year, month)
        if region is not None:
            region = validate_region(region)

        existing = self._calendars.find_one(year, month)
        if existing is not None:
            if region and existing.region != region:
                logger.debug(
                    "Calendar %s-%s belongs to region %s, requested %s; returning existing",
                    year,
                    month,
                    existing.region,
                    region,
                )
            return existing

        base = self._template.generate_base_calendar(year, month, region)
        saved = self._persist(base)
        logger.info("Created new calendar for %s-%s", year, month)
        return saved

    def get_calendar(self, year: str, month: str) -> Optional[Calendar]:
        validate_year_month(year, month)
        return self._calendars.find_one(year, month)

    def create_calendar(self, calendar: Calendar) -> Calendar:
        validate_calendar_data(calendar)

        if self._calendars.exists(calendar.year, calendar.month):
            raise ConflictError(f"Calendar already exists for {calendar.year}-{calendar.month}")

        saved = self._persist(calendar)
        logger.info("Created calendar for %s-%s", calendar.year, calendar.month)
        return saved

    def generate_calendar(self, year: str, month: str, holidays: Optional[Iterable[int]] = None) -> Calendar:
        """Build a calendar from the template and promote ``holidays`` to holiday.

        Replaces any calendar already stored for the month.
        """
        logger.debug("Generating calendar for %s-%s with holidays %s", year, month, holidays)
        validate_year_month(year, month)

        calendar = self._template.generate_base_calendar(year, month)
        for day in holidays or ():
            if isinstance(day, bool) or not isinstance(day, int):
                raise ValidationError(f"Holiday must be a day number, got {day!r}")
            entry = calendar.get_day_entry(day) if MIN_DAY <= day <= MAX_DAY else None
            if entry is None:
                logger.debug("Ignoring holiday %s outside %s-%s", day, year, month)
                continue
            if entry.type != DayType.HOLIDAY.value:
                calendar.update_day_type(day, DayType.HOLIDAY.value)

        existing = self._calendars.find_one(year, month)
        if existing is not None:
            calendar.calendar_id = existing.calendar_id
            calendar.created_at = existing.created_at
            logger.info("Regenerating existing calendar for %s-%s", year, month)

        return self._persist(calendar)

    def update_calendar(self, year: str, month: str, calendar: Calendar) -> Calendar:
        """Replace days, region and organization of an existing calendar."""
        logger.debug("Updating calendar for %s-%s", year, month)
        validate_year_month(year, month)
        if calendar is None:
            raise ValidationError("Calendar cannot be empty")

        if calendar.year is None:
            calendar.year = year
        if calendar.month is None:
            calendar.month = month
        if (calendar.year, calendar.month) != (year, month):
            raise ValidationError(
                f"Calendar {calendar.year}-{calendar.month} does not match target {year}-{month}"
            )
        validate_calendar_data(calendar)

        existing = self._require_calendar(year, month)
        existing.replace_days(calendar.days)
        existing.region = calendar.region
        existing.organization_id = calendar.organization_id
        return self._persist(existing)

    def delete_calendar(self, year: str, month: str) -> None:
        logger.debug("Deleting calendar for %s-%s", year, month)
        validate_year_month(year, month)

        if not self._calendars.exists(year, month):
            raise NotFoundError(f"Calendar not found for {year}-{month}")

        self._calendars.delete_one(year, month)
        logger.info("Deleted calendar for %s-%s", year, month)

    # ===== Day-level updates =====

    def update_attendance(
        self,
        year: str,
        month: str,
        day: int,
        attendance: Optional[str],
        *,
        updated_by: Optional[str] = None,
    ) -> Calendar:
        logger.debug("Updating attendance for %s-%s-%s to %s", year, month, day, attendance)
        attendance = parse_attendance(attendance)

        calendar = self.get_or_create_calendar(year, month)
        self._require_day(calendar, day)
        if not calendar.update_attendance(day, attendance, updated_by=updated_by):
            raise ValidationError(f"Cannot set attendance for day {day}: not a working day")

        return self._persist(calendar)

    def clear_attendance(self, year: str, month: str, day: int, *, updated_by: Optional[str] = None) -> Calendar:
        return self.update_attendance(year, month, day, None, updated_by=updated_by)

    def update_day_type(
        self,
        year: str,
        month: str,
        day: int,
        type: str,
        *,
        updated_by: Optional[str] = None,
    ) -> Calendar:
        logger.debug("Updating day type for %s-%s-%s to %s", year, month, day, type)
        type = parse_day_type(type)

        calendar = self.get_or_create_calendar(year, month)
        if not calendar.update_day_type(day, type, updated_by=updated_by):
            raise NotFoundError(f"Day {day} not found in {year}-{month}")

        return self._persist(calendar)

    def update_day_status(
        self,
        year: str,
        month: str,
        day: int,
        type: Optional[str] = None,
        attendance: Optional[str] = None,
        description: Optional[str] = None,
        *,
        updated_by: Optional[str] = None,
    ) -> Calendar:
        logger.debug("Updating day status for %s-%s-%s to type=%s attendance=%s", year, month, day, type, attendance)
        if type is not None:
            type = parse_day_type(type)
        attendance = parse_attendance(attendance)

        calendar = self.get_or_create_calendar(year, month)
        entry = self._require_day(calendar, day)
        validate_attendance_for_type(type or entry.type, attendance)

        calendar.update_day_status(day, type, attendance, description, updated_by=updated_by)
        return self._persist(calendar)

    def add_day_entry(self, year: str, month: str, entry: DayEntry) -> Calendar:
        logger.debug("Adding day entry for %s-%s-%s", year, month, getattr(entry, "day", None))
        validate_year_month(year, month)
        validate_day_entry(entry, year, month)

        calendar = self.get_or_create_calendar(year, month)
        calendar.add_day_entry(entry)
        return self._persist(calendar)

    def get_day_status(self, year: str, month: str, day: int) -> dict:
        calendar = self.get_or_create_calendar(year, month)
        entry = self._require_day(calendar, day)

        if entry.is_working:
            attendance = entry.attendance or ATTENDANCE_NOT_SET
        else:
            attendance = ATTENDANCE_NOT_APPLICABLE

        status = {
            "day": entry.day,
            "type": entry.type,
            "is_updated": bool(entry.is_updated),
            "attendance": attendance,
        }
        if entry.description is not None:
            status["description"] = entry.description
        return status

    # ===== Bulk updates (per-item tolerant) =====

    def bulk_update_attendance(
        self,
        year: str,
        month: str,
        attendance_map: Mapping[int, Optional[str]],
        *,
        updated_by: Optional[str] = None,
    ) -> BulkUpdateResult:
        logger.debug("Bulk updating attendance for %s-%s", year, month)
        if not attendance_map:
            raise ValidationError("Attendance map cannot be empty")

        calendar = self.get_or_create_calendar(year, month)
        applied: list[int] = []
        skipped: dict[int, str] = {}

        for day, value in attendance_map.items():
            try:
                attendance = parse_attendance(value)
            except ValidationError as e:
                logger.warning("Invalid attendance %r for day %s in %s, skipping", value, day, calendar.key)
                skipped[day] = str(e)
                continue

            entry = calendar.get_day_entry(day)
            if entry is None:
                logger.warning("Day %s not found in %s, skipping", day, calendar.key)
                skipped[day] = "day not found"
                continue
            if not calendar.update_attendance(day, attendance, updated_by=updated_by):
                skipped[day] = "not a working day"
                continue
            applied.append(day)

        saved = self._persist(calendar)
        return BulkUpdateResult(calendar=saved, applied=applied, skipped=skipped)

    def bulk_update_day_types(
        self,
        year: str,
        month: str,
        day_type_map: Mapping[int, str],
        *,
        updated_by: Optional[str] = None,
    ) -> BulkUpdateResult:
        logger.debug("Bulk updating day types for %s-%s", year, month)
        if not day_type_map:
            raise ValidationError("Day type map cannot be empty")

        calendar = self.get_or_create_calendar(year, month)
        applied: list[int] = []
        skipped: dict[int, str] = {}

        for day, value in day_type_map.items():
            try:
                day_type = parse_day_type(value)
            except ValidationError as e:
                logger.warning("Invalid day type %r for day %s in %s, skipping", value, day, calendar.key)
                skipped[day] = str(e)
                continue

            if not calendar.update_day_type(day, day_type, updated_by=updated_by):
                skipped[day] = "day not found"
                continue
            applied.append(day)

        saved = self._persist(calendar)
        return BulkUpdateResult(calendar=saved, applied=applied, skipped=skipped)

    # ===== Statistics =====

    def get_calendar_statistics(self, year: str, month: str) -> dict:
        logger.debug("Calculating statistics for %s-%s", year, month)
        calendar = self.get_or_create_calendar(year, month)

        return {
            "total_days": len(calendar.days),
            "working_days": calendar.working_days_count(),
            "holidays": calendar.holidays_count(),
            "weekends": calendar.weekends_count(),
            "leave_days": calendar.leave_days_count(),
            "office_attendance": calendar.office_attendance_count(),
            "wfh_attendance": calendar.wfh_attendance_count(),
            "total_attendance": calendar.attendance_days_count(),
            "working_days_without_attendance": calendar.working_days_without_attendance(),
            "updated_days": calendar.updated_days_count(),
            "attendance_rate": calendar.attendance_rate(),
            "office_attendance_rate": calendar.office_attendance_rate(),
            "wfh_attendance_rate": calendar.wfh_attendance_rate(),
        }

    @staticmethod
    def _roll_up(calendars: Sequence[Calendar]) -> dict:
        return {
            "total_calendars": len(calendars),
            "total_working_days": sum(c.working_days_count() for c in calendars),
            "total_holidays": sum(c.holidays_count() for c in calendars),
            "total_weekends": sum(c.weekends_count() for c in calendars),
            "total_leave_days": sum(c.leave_days_count() for c in calendars),
            "total_office_attendance": sum(c.office_attendance_count() for c in calendars),
            "total_wfh_attendance": sum(c.wfh_attendance_count() for c in calendars),
        }

    def get_overall_statistics(self) -> dict:
        logger.debug("Calculating overall statistics")
        return self._roll_up(self._calendars.find_all())

    def get_yearly_statistics(self, year: str) -> dict:
        logger.debug("Calculating yearly statistics for %s", year)
        validate_year(year)
        stats = {"year": year}
        stats.update(self._roll_up(self._calendars.find_by_year(year)))
        return stats

    def get_day_counts(self) -> dict:
        """Day counts of each type and attendance value across all calendars."""
        return {
            "working_days": self._calendars.count_days_by_type(DayType.WORKING.value),
            "holidays": self._calendars.count_days_by_type(DayType.HOLIDAY.value),
            "weekends": self._calendars.count_days_by_type(DayType.WEEKEND.value),
            "leave_days": self._calendars.count_days_by_type(DayType.LEAVE.value),
            "office_attendance": self._calendars.count_days_by_attendance(Attendance.OFFICE.value),
            "wfh_attendance": self._calendars.count_days_by_attendance(Attendance.WFH.value),
        }

    # ===== Queries =====

    def get_all_calendars(self) -> Sequence[Calendar]:
        return self._calendars.find_all()

    def get_calendars_by_year(self, year: str) -> Sequence[Calendar]:
        validate_year(year)
        return self._calendars.find_by_year(year)

    def get_calendars_by_date_range(
        self,
        start_year: str,
        start_month: str,
        end_year: str,
        end_month: str,
    ) -> Sequence[Calendar]:
        validate_year_month(start_year, start_month)
        validate_year_month(end_year, end_month)
        if (start_year, start_month) > (end_year, end_month):
            raise ValidationError(f"Range start {start_year}-{start_month} is after end {end_year}-{end_month}")
        return self._calendars.find_by_date_range(start_year, start_month, end_year, end_month)

    def get_calendars_with_holidays(self) -> Sequence[Calendar]:
        return self._calendars.find_with_day_type(DayType.HOLIDAY.value)

    def get_calendars_with_weekends(self) -> Sequence[Calendar]:
        return self._calendars.find_with_day_type(DayType.WEEKEND.value)

    def get_calendars_with_working_days(self) -> Sequence[Calendar]:
        return self._calendars.find_with_day_type(DayType.WORKING.value)

    def get_calendars_with_attendance(self) -> Sequence[Calendar]:
        return self._calendars.find_with_attendance()

    def get_calendars_with_office_attendance(self) -> Sequence[Calendar]:
        return self._calendars.find_with_attendance(Attendance.OFFICE.value)

    def get_calendars_with_wfh_attendance(self) -> Sequence[Calendar]:
        return self._calendars.find_with_attendance(Attendance.WFH.value)

    def get_calendars_with_mixed_attendance(self) -> Sequence[Calendar]:
        return self._calendars.find_with_mixed_attendance()

    def get_calendars_with_incomplete_attendance(self) -> Sequence[Calendar]:
        return self._calendars.find_with_incomplete_attendance()

    def get_calendars_with_full_attendance(self) -> Sequence[Calendar]:
        return self._calendars.find_with_full_attendance()

    def get_calendars_with_attendance_rate_at_least(self, threshold: float) -> Sequence[Calendar]:
        if not 0.0 <= float(threshold) <= 1.0:
            raise ValidationError("Attendance rate threshold must be between 0 and 1")
        return [c for c in self._calendars.find_all() if c.attendance_rate() >= float(threshold)]

    def get_latest_calendar(self) -> Optional[Calendar]:
        return self._calendars.find_latest()

    def get_oldest_calendar(self) -> Optional[Calendar]:
        return self._calendars.find_oldest()

    def calendar_exists(self, year: str, month: str) -> bool:
        validate_year_month(year, month)
        return self._calendars.exists(year, month)

    def get_total_calendars_count(self) -> int:
        return self._calendars.count_all()

    def get_distinct_years(self) -> Sequence[str]:
        return self._calendars.distinct_years()

    def get_calendar_count_by_year(self, year: str) -> int:
        validate_year(year)
        return self._calendars.count_by_year(year)
