from attendance_calendar.calendars.templates.standard_template import WeekendHolidayTemplate


def test_february_2025_has_28_days_and_saturday_first():
    cal = WeekendHolidayTemplate().generate_base_calendar("2025", "02")

    assert [d.day for d in cal.days] == list(range(1, 29))
    assert cal.get_day_entry(1).type == "weekend"
    assert cal.get_day_entry(2).type == "weekend"
    assert cal.get_day_entry(3).type == "working"
    assert cal.weekends_count() == 8
    assert cal.working_days_count() == 20
    assert cal.template_id == "standard"
    assert cal.template_version == "1.0"
    assert cal.region == "default"


def test_leap_year_february():
    cal = WeekendHolidayTemplate().generate_base_calendar("2024", "02", "vn")

    assert len(cal.days) == 29
    assert cal.region == "vn"


def test_fresh_days_are_not_updated_and_have_no_attendance():
    cal = WeekendHolidayTemplate().generate_base_calendar("2025", "01")

    assert all(not d.is_updated for d in cal.days)
    assert all(d.attendance is None for d in cal.days)
    assert all(d.original_type == d.type for d in cal.days)


def test_holiday_takes_precedence_over_weekend():
    template = WeekendHolidayTemplate(holidays=[1, 4])

    assert template.classify("2025", "01", 1) == "holiday"
    assert template.classify("2025", "01", 4) == "holiday"
    assert template.classify("2025", "01", 5) == "weekend"
    assert template.classify("2025", "01", 2) == "working"
