"""Generate base calendars for every month of a year.

Usage: python scripts/seed_db.py 2025 [MM-DD ...]

Each holiday is MM-DD, e.g. ``01-01 04-30 05-01``.
"""

from __future__ import annotations

import argparse
import importlib
from collections import defaultdict

from dotenv import load_dotenv

from attendance_calendar.config import get_settings_module
from attendance_calendar.container import build_container


def _parse_holidays(values: list[str]) -> dict[str, list[int]]:
    by_month: dict[str, list[int]] = defaultdict(list)
    for value in values:
        month, sep, day = value.partition("-")
        if not sep or not month.isdigit() or not day.isdigit() or not 1 <= int(month) <= 12:
            raise ValueError(f"invalid holiday {value!r}, expected MM-DD")
        by_month[month.zfill(2)].append(int(day))
    return by_month


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("year")
    parser.add_argument("holidays", nargs="*", help="MM-DD")
    args = parser.parse_args()
    try:
        holidays = _parse_holidays(args.holidays)
    except ValueError as e:
        parser.error(str(e))

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    container = build_container(db_config=db_config)

    for m in range(1, 13):
        month = f"{m:02d}"
        cal = container.calendar_service.generate_calendar(args.year, month, holidays.get(month))
        print(f"{cal.key}: working={cal.working_days_count()} holidays={cal.holidays_count()}")

    print(
        "OK: Seeded calendars -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
