"""Structural conversion between Calendar models and plain dicts.

Used both for the JSON ``days`` column in MySQL and for HTTP bodies. Only the
shape is decoded here; business rules live in ``validation``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.exceptions import ValidationError
from .model import Calendar, DayEntry


def _dt_to_str(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _str_to_dt(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid timestamp: {value!r}") from e


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _day_number(value: Any) -> int:
    # Integers and digit strings only; 2.9 or True are not day numbers.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.isascii() and value.strip().isdigit():
        return int(value)
    raise ValidationError(f"Day must be an integer: {value!r}")


def day_entry_to_dict(entry: DayEntry) -> dict:
    return {
        "day": entry.day,
        "type": entry.type,
        "attendance": entry.attendance,
        "is_updated": bool(entry.is_updated),
        "original_type": entry.original_type,
        "original_attendance": entry.original_attendance,
        "last_updated": _dt_to_str(entry.last_updated),
        "updated_by": entry.updated_by,
        "description": entry.description,
    }


def day_entry_from_dict(data: Mapping[str, Any]) -> DayEntry:
    if not isinstance(data, Mapping):
        raise ValidationError("Day entry must be an object")
    if "day" not in data:
        raise ValidationError("Day entry requires 'day'")

    day = _day_number(data["day"])
    is_updated = data.get("is_updated")
    if is_updated is None:
        is_updated = False
    if not isinstance(is_updated, bool):
        raise ValidationError(f"is_updated must be true or false: {is_updated!r}")

    entry = DayEntry(
        day=day,
        type=_opt_str(data.get("type")),
        attendance=_opt_str(data.get("attendance")),
        is_updated=is_updated,
        original_type=_opt_str(data.get("original_type")),
        original_attendance=_opt_str(data.get("original_attendance")),
        last_updated=_str_to_dt(data.get("last_updated")),
        updated_by=_opt_str(data.get("updated_by")),
        description=_opt_str(data.get("description")),
    )
    return entry


def calendar_to_dict(calendar: Calendar) -> dict:
    return {
        "calendar_id": calendar.calendar_id,
        "year": calendar.year,
        "month": calendar.month,
        "days": [day_entry_to_dict(d) for d in sorted(calendar.days, key=lambda d: d.day)],
        "template_id": calendar.template_id,
        "template_version": calendar.template_version,
        "region": calendar.region,
        "organization_id": calendar.organization_id,
        "created_at": _dt_to_str(calendar.created_at),
        "updated_at": _dt_to_str(calendar.updated_at),
    }


def calendar_from_dict(data: Mapping[str, Any]) -> Calendar:
    if not isinstance(data, Mapping):
        raise ValidationError("Calendar must be an object")

    raw_days = data.get("days")
    if raw_days is not None and not isinstance(raw_days, list):
        raise ValidationError("Calendar days must be a list")

    calendar = Calendar(
        year=_opt_str(data.get("year")),
        month=_opt_str(data.get("month")),
        days=[day_entry_from_dict(d) for d in raw_days] if raw_days is not None else None,  # type: ignore[arg-type]
        template_id=_opt_str(data.get("template_id")),
        template_version=_opt_str(data.get("template_version")),
        region=_opt_str(data.get("region")),
        organization_id=_opt_str(data.get("organization_id")),
        calendar_id=int(data["calendar_id"]) if data.get("calendar_id") is not None else None,
        created_at=_str_to_dt(data.get("created_at")),
        updated_at=_str_to_dt(data.get("updated_at")),
    )
    return calendar
