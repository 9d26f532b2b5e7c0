from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..model import Calendar


class CalendarTemplate(ABC):
    """Template interface (Strategy Pattern for seeding a month)."""

    @abstractmethod
    def generate_base_calendar(self, year: str, month: str, region: Optional[str] = None) -> Calendar:
        raise NotImplementedError
