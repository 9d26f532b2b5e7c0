from __future__ import annotations

from enum import Enum


class DayType(str, Enum):
    """Classification of one calendar day."""

    WORKING = "working"
    HOLIDAY = "holiday"
    WEEKEND = "weekend"
    LEAVE = "leave"


class Attendance(str, Enum):
    """Where a working day was worked. Only valid on working days."""

    OFFICE = "wfoffice"
    WFH = "wfh"


DAY_TYPE_VALUES = frozenset(t.value for t in DayType)
ATTENDANCE_VALUES = frozenset(a.value for a in Attendance)
