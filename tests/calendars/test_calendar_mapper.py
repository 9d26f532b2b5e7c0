from datetime import datetime

import pytest

from attendance_calendar.calendars.mapper import calendar_from_dict, calendar_to_dict, day_entry_from_dict
from attendance_calendar.calendars.model import Calendar, DayEntry
from attendance_calendar.core.exceptions import ValidationError


def test_calendar_to_dict_sorts_days_and_formats_timestamps():
    cal = Calendar(
        year="2025",
        month="01",
        days=[DayEntry(day=3, type="working"), DayEntry(day=1, type="holiday")],
        created_at=datetime(2025, 1, 1, 9, 0, 0),
    )

    data = calendar_to_dict(cal)

    assert [d["day"] for d in data["days"]] == [1, 3]
    assert data["created_at"] == "2025-01-01T09:00:00"
    assert data["updated_at"] is None


def test_calendar_from_dict_keeps_missing_days_as_none():
    cal = calendar_from_dict({"year": "2025", "month": "01"})

    assert cal.days is None
    assert cal.region == "default"


def test_day_entry_from_dict_preserves_original_snapshot():
    entry = day_entry_from_dict(
        {"day": "5", "type": "leave", "original_type": "working", "is_updated": True}
    )

    assert entry.day == 5
    assert entry.type == "leave"
    assert entry.original_type == "working"
    assert entry.is_updated is True


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"type": "working"},
        {"day": "x", "type": "working"},
        {"day": 2.9, "type": "working"},
        {"day": True, "type": "working"},
    ],
)
def test_malformed_day_entries(payload):
    with pytest.raises(ValidationError):
        day_entry_from_dict(payload)


def test_days_must_be_a_list():
    with pytest.raises(ValidationError):
        calendar_from_dict({"year": "2025", "month": "01", "days": {"1": "working"}})


@pytest.mark.parametrize("flag", ["false", 1, "yes"])
def test_is_updated_must_be_a_boolean(flag):
    with pytest.raises(ValidationError, match="is_updated"):
        day_entry_from_dict({"day": 2, "type": "working", "is_updated": flag})


def test_is_updated_null_means_not_updated():
    entry = day_entry_from_dict({"day": 2, "type": "working", "is_updated": None})

    assert entry.is_updated is False
