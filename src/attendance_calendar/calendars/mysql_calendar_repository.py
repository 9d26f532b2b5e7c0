from __future__ import annotations

import json
from typing import Optional, Sequence

from ..core.enums import ATTENDANCE_VALUES, Attendance, DayType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, load_json_column
from .mapper import day_entry_from_dict, day_entry_to_dict
from .model import Calendar
from .repository import CalendarRepository

_COLUMNS = """
    c.calendar_id, c.year, c.month, c.region, c.organization_id,
    c.template_id, c.template_version, c.days, c.created_at, c.updated_at
"""

# One row per element of c.days.
_DAYS_TABLE = """
    JSON_TABLE(c.days, '$[*]' COLUMNS (
        day_type VARCHAR(16) PATH '$.type',
        attendance VARCHAR(16) PATH '$.attendance'
    )) AS d
"""

_ATTENDANCE_IN = "(" + ", ".join(f"'{v}'" for v in sorted(ATTENDANCE_VALUES)) + ")"
_HAS_ATTENDANCE = f"d.attendance IN {_ATTENDANCE_IN}"
_MISSING_ATTENDANCE = f"(d.attendance IS NULL OR d.attendance NOT IN {_ATTENDANCE_IN})"
_INCOMPLETE_DAY = f"d.day_type = '{DayType.WORKING.value}' AND {_MISSING_ATTENDANCE}"


def _any_day(condition: str) -> str:
    return f"EXISTS (SELECT 1 FROM {_DAYS_TABLE} WHERE {condition})"


def _row_to_calendar(r: dict) -> Calendar:
    raw_days = load_json_column(r.get("days")) or []
    return Calendar(
        calendar_id=int(r["calendar_id"]),
        year=str(r["year"]),
        month=str(r["month"]),
        days=[day_entry_from_dict(d) for d in raw_days],
        region=r.get("region"),
        organization_id=r.get("organization_id"),
        template_id=r.get("template_id"),
        template_version=r.get("template_version"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLCalendarRepository(CalendarRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str = "", params: tuple = (), *, order: str = "c.year ASC, c.month ASC", limit: Optional[int] = None) -> list[Calendar]:
        sql = f"SELECT {_COLUMNS} FROM calendars c"
        if where:
            sql += f" WHERE {where}"
        sql += f" ORDER BY {order}"
        if limit is not None:
            sql += f" LIMIT {int(limit)}"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_row_to_calendar(r) for r in fetchall(cur)]

    def _scalar(self, sql: str, params: tuple = ()) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            r = fetchone(cur)
            return int(r["n"]) if r and r.get("n") is not None else 0

    def find_one(self, year: str, month: str) -> Optional[Calendar]:
        rows = self._select("c.year=%s AND c.month=%s", (year, month))
        return rows[0] if rows else None

    def exists(self, year: str, month: str) -> bool:
        return self._scalar("SELECT COUNT(*) AS n FROM calendars WHERE year=%s AND month=%s", (year, month)) > 0

    def delete_one(self, year: str, month: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM calendars WHERE year=%s AND month=%s", (year, month))
            return cur.rowcount > 0

    def save(self, calendar: Calendar) -> Calendar:
        days_json = json.dumps(
            [day_entry_to_dict(d) for d in sorted(calendar.days, key=lambda d: d.day)],
            ensure_ascii=False,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO calendars(
                    year, month, region, organization_id, template_id, template_version,
                    days, created_at, updated_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    region=VALUES(region),
                    organization_id=VALUES(organization_id),
                    template_id=VALUES(template_id),
                    template_version=VALUES(template_version),
                    days=VALUES(days),
                    updated_at=VALUES(updated_at)
                """,
                (
                    calendar.year,
                    calendar.month,
                    calendar.region,
                    calendar.organization_id,
                    calendar.template_id,
                    calendar.template_version,
                    days_json,
                    calendar.created_at,
                    calendar.updated_at,
                ),
            )

            # If it was an update, lastrowid can be 0; fetch calendar_id.
            if cur.lastrowid:
                calendar.calendar_id = int(cur.lastrowid)
            else:
                cur.execute(
                    "SELECT calendar_id, created_at FROM calendars WHERE year=%s AND month=%s",
                    (calendar.year, calendar.month),
                )
                r = fetchone(cur)
                if r:
                    calendar.calendar_id = int(r["calendar_id"])
                    calendar.created_at = r.get("created_at") or calendar.created_at
        return calendar

    def find_all(self) -> Sequence[Calendar]:
        return self._select()

    def find_by_year(self, year: str) -> Sequence[Calendar]:
        return self._select("c.year=%s", (year,))

    def find_by_date_range(self, start_year: str, start_month: str, end_year: str, end_month: str) -> Sequence[Calendar]:
        # year/month are fixed-width strings, so string comparison is chronological.
        return self._select(
            "(c.year > %s OR (c.year = %s AND c.month >= %s)) AND (c.year < %s OR (c.year = %s AND c.month <= %s))",
            (start_year, start_year, start_month, end_year, end_year, end_month),
        )

    def find_with_day_type(self, day_type: str) -> Sequence[Calendar]:
        return self._select(_any_day("d.day_type = %s"), (day_type,))

    def find_with_attendance(self, attendance: Optional[str] = None) -> Sequence[Calendar]:
        if attendance is None:
            return self._select(_any_day(_HAS_ATTENDANCE))
        return self._select(_any_day("d.attendance = %s"), (attendance,))

    def find_with_mixed_attendance(self) -> Sequence[Calendar]:
        return self._select(
            f"{_any_day('d.attendance = %s')} AND {_any_day('d.attendance = %s')}",
            (Attendance.OFFICE.value, Attendance.WFH.value),
        )

    def find_with_incomplete_attendance(self) -> Sequence[Calendar]:
        return self._select(_any_day(_INCOMPLETE_DAY))

    def find_with_full_attendance(self) -> Sequence[Calendar]:
        return self._select(f"NOT {_any_day(_INCOMPLETE_DAY)}")

    def find_latest(self) -> Optional[Calendar]:
        rows = self._select(order="c.year DESC, c.month DESC", limit=1)
        return rows[0] if rows else None

    def find_oldest(self) -> Optional[Calendar]:
        rows = self._select(limit=1)
        return rows[0] if rows else None

    def count_days_by_type(self, day_type: str) -> int:
        return self._scalar(f"SELECT COUNT(*) AS n FROM calendars c, {_DAYS_TABLE} WHERE d.day_type = %s", (day_type,))

    def count_days_by_attendance(self, attendance: str) -> int:
        return self._scalar(f"SELECT COUNT(*) AS n FROM calendars c, {_DAYS_TABLE} WHERE d.attendance = %s", (attendance,))

    def count_all(self) -> int:
        return self._scalar("SELECT COUNT(*) AS n FROM calendars")

    def count_by_year(self, year: str) -> int:
        return self._scalar("SELECT COUNT(*) AS n FROM calendars WHERE year=%s", (year,))

    def distinct_years(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT year FROM calendars ORDER BY year ASC")
            return [str(r["year"]) for r in fetchall(cur)]
