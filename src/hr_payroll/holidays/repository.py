from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError

    def create(self, *, name: str, holiday_date: date, description: Optional[str] = None) -> int:
        raise NotImplementedError

    def list_between(self, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError

    def update(self, holiday: Holiday) -> bool:
        raise NotImplementedError

    def list_upcoming(self, from_date: date, limit: int) -> Sequence[Holiday]:
        raise NotImplementedError
