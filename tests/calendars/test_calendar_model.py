from attendance_calendar.calendars.model import Calendar, DayEntry
from attendance_calendar.core.enums import Attendance, DayType


def _calendar(*entries: DayEntry) -> Calendar:
    return Calendar(year="2025", month="01", days=list(entries))


def test_day_entry_snapshots_original_values():
    entry = DayEntry(day=3, type=DayType.WORKING.value, attendance=Attendance.WFH.value)

    assert entry.original_type == "working"
    assert entry.original_attendance == "wfh"
    assert entry.is_updated is False


def test_calendar_defaults_region_and_template_version():
    cal = Calendar(year="2025", month="01", region="", template_version="")

    assert cal.region == "default"
    assert cal.template_version == "1.0"
    assert cal.days == []


def test_add_day_entry_replaces_same_day():
    cal = _calendar(DayEntry(day=1, type="working"))

    cal.add_day_entry(DayEntry(day=1, type="holiday", description="New Year"))
    cal.add_day_entry(None)

    assert len(cal.days) == 1
    assert cal.get_day_entry(1).type == "holiday"
    assert cal.get_day_entry(1).description == "New Year"


def test_update_attendance_on_working_day_marks_updated():
    cal = _calendar(DayEntry(day=2, type="working"))

    assert cal.update_attendance(2, "wfoffice", updated_by="alice") is True

    entry = cal.get_day_entry(2)
    assert entry.attendance == "wfoffice"
    assert entry.is_updated is True
    assert entry.updated_by == "alice"
    assert entry.last_updated is not None
    assert entry.original_attendance is None


def test_update_attendance_rejects_non_working_and_missing_days():
    cal = _calendar(DayEntry(day=4, type="weekend"))

    assert cal.update_attendance(4, "wfh") is False
    assert cal.update_attendance(30, "wfh") is False
    assert cal.get_day_entry(4).attendance is None
    assert cal.get_day_entry(4).is_updated is False


def test_update_attendance_same_value_is_not_an_update():
    cal = _calendar(DayEntry(day=2, type="working", attendance="wfh"))

    assert cal.update_attendance(2, "wfh") is True
    assert cal.get_day_entry(2).is_updated is False


def test_update_day_type_to_non_working_clears_attendance():
    cal = _calendar(DayEntry(day=2, type="working", attendance="wfoffice"))

    assert cal.update_day_type(2, "leave") is True

    entry = cal.get_day_entry(2)
    assert entry.type == "leave"
    assert entry.attendance is None
    assert entry.original_type == "working"
    assert entry.original_attendance == "wfoffice"


def test_update_day_type_is_idempotent():
    cal = _calendar(DayEntry(day=2, type="working"))

    cal.update_day_type(2, "holiday")
    first = cal.get_day_entry(2).last_updated
    cal.update_day_type(2, "holiday")

    assert cal.get_day_entry(2).last_updated == first
    assert cal.holidays_count() == 1


def test_update_day_status_applies_type_then_attendance():
    cal = _calendar(DayEntry(day=6, type="leave"))

    assert cal.update_day_status(6, "working", "wfh", "back from leave") is True

    entry = cal.get_day_entry(6)
    assert entry.type == "working"
    assert entry.attendance == "wfh"
    assert entry.description == "back from leave"
    assert entry.is_updated is True


def test_update_day_status_description_only_is_not_dirty():
    cal = _calendar(DayEntry(day=6, type="working"))

    cal.update_day_status(6, None, None, "note")

    assert cal.get_day_entry(6).description == "note"
    assert cal.get_day_entry(6).is_updated is False


def test_statistics_and_rates():
    cal = _calendar(
        DayEntry(day=1, type="holiday"),
        DayEntry(day=2, type="working", attendance="wfoffice"),
        DayEntry(day=3, type="working", attendance="wfh"),
        DayEntry(day=4, type="weekend"),
        DayEntry(day=5, type="weekend"),
        DayEntry(day=6, type="working"),
        DayEntry(day=7, type="leave"),
    )

    assert cal.working_days_count() == 3
    assert cal.holidays_count() == 1
    assert cal.weekends_count() == 2
    assert cal.leave_days_count() == 1
    assert cal.office_attendance_count() == 1
    assert cal.wfh_attendance_count() == 1
    assert cal.attendance_days_count() == 2
    assert cal.working_days_without_attendance() == 1
    assert abs(cal.attendance_rate() - 2 / 3) < 1e-9
    assert cal.office_attendance_rate() == 0.5
    assert cal.wfh_attendance_rate() == 0.5


def test_rates_are_zero_without_working_days():
    cal = _calendar(DayEntry(day=4, type="weekend"))

    assert cal.attendance_rate() == 0.0
    assert cal.office_attendance_rate() == 0.0
    assert cal.wfh_attendance_rate() == 0.0
