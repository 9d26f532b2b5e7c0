"""Ví dụ: dùng service layer (không qua Flask).

Nghiệp vụ nằm ở CalendarService; controller chỉ là lớp mỏng chuyển JSON.
"""

import importlib

from dotenv import load_dotenv

from attendance_calendar.config import get_settings_module
from attendance_calendar.container import build_container


def main():
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    service = container.calendar_service

    service.update_attendance("2025", "01", 2, "wfoffice", updated_by="example")
    print(service.get_calendar_statistics("2025", "01"))


if __name__ == "__main__":
    main()
