from __future__ import annotations

from dataclasses import dataclass

from .calendars.mysql_calendar_repository import MySQLCalendarRepository
from .calendars.repository import CalendarRepository
from .calendars.service import CalendarService
from .calendars.templates.standard_template import WeekendHolidayTemplate
from .database.connection import DBConfig, DatabaseConnection


@dataclass(frozen=True)
class Container:
    calendars_repo: CalendarRepository
    calendar_service: CalendarService


def build_container_for(calendars_repo: CalendarRepository) -> Container:
    calendar_service = CalendarService(calendars_repo, template=WeekendHolidayTemplate())
    return Container(calendars_repo=calendars_repo, calendar_service=calendar_service)


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_container_for(MySQLCalendarRepository(conn))
