from __future__ import annotations

import dataclasses
from datetime import date
from typing import Optional, Sequence

from ..audit.service import AuditService
from ..common.datetime_utils import month_range, today_local, working_days
from ..common.identity import Actor
from ..common.validators import require_month, require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.transaction import UnitOfWork
from .model import Holiday
from .repository import HolidayRepository


class HolidayService:
    def __init__(self, holidays: HolidayRepository, uow: UnitOfWork, audit: AuditService):
        self._holidays = holidays
        self._uow = uow
        self._audit = audit

    def _get(self, holiday_id: int) -> Holiday:
        holiday = self._holidays.get_by_id(holiday_id)
        if not holiday:
            raise NotFoundError("Holiday not found")
        return holiday

    def _ensure_free_date(self, holiday_date: date, exclude_id: Optional[int] = None) -> None:
        existing = self._holidays.get_by_date(holiday_date)
        if existing and existing.id != exclude_id:
            raise ConflictError("A holiday already exists on this date")

    def get_holiday(self, holiday_id: int) -> Holiday:
        return self._get(holiday_id)

    def create_holiday(self, *, actor: Actor, name: str, holiday_date: date, description: Optional[str] = None) -> Holiday:
        actor.require_manager()
        name = require_non_empty(name, "Holiday name")
        self._ensure_free_date(holiday_date)

        with self._uow.transaction():
            holiday_id = self._holidays.create(name=name, holiday_date=holiday_date, description=description)
            holiday = self._holidays.get_by_id(holiday_id)
            self._audit.record(actor=actor, action="CREATE", entity="PUBLIC_HOLIDAY", entity_id=holiday_id, changes={"holiday": holiday})
        return holiday

    def update_holiday(
        self,
        *,
        actor: Actor,
        holiday_id: int,
        name: Optional[str] = None,
        holiday_date: Optional[date] = None,
        description: Optional[str] = None,
    ) -> Holiday:
        """Fields left as None keep their stored value."""
        actor.require_manager()
        before = self._get(holiday_id)
        if holiday_date is not None and holiday_date != before.holiday_date:
            self._ensure_free_date(holiday_date, exclude_id=before.id)

        after = dataclasses.replace(
            before,
            name=require_non_empty(name, "Holiday name") if name is not None else before.name,
            holiday_date=holiday_date or before.holiday_date,
            description=description if description is not None else before.description,
        )
        with self._uow.transaction():
            if not self._holidays.update(after):
                raise NotFoundError("Holiday not found")
            self._audit.record(
                actor=actor, action="UPDATE", entity="PUBLIC_HOLIDAY", entity_id=before.id, changes={"before": before, "after": after}
            )
        return self._get(before.id)

    def list_holidays(self, *, year: Optional[int] = None, month: Optional[int] = None) -> Sequence[Holiday]:
        if year is None:
            return self._holidays.list_between()
        if month is None:
            return self._holidays.list_between(date(int(year), 1, 1), date(int(year), 12, 31))
        month, year = require_month(month, year)
        return self._holidays.list_between(*month_range(month, year))

    def upcoming_holidays(self, *, limit: int = 5, today: Optional[date] = None) -> Sequence[Holiday]:
        if limit < 1:
            raise ValidationError("Limit must be positive")
        return self._holidays.list_upcoming(today or today_local(), limit)

    def delete_holiday(self, *, actor: Actor, holiday_id: int) -> None:
        actor.require_manager()
        holiday = self._get(holiday_id)
        with self._uow.transaction():
            self._holidays.delete(holiday_id)
            self._audit.record(actor=actor, action="DELETE", entity="PUBLIC_HOLIDAY", entity_id=holiday_id, changes={"holiday": holiday})

    def working_days_between(self, start: date, end: date) -> int:
        holidays = [h.holiday_date for h in self._holidays.list_between(start, end)]
        return working_days(start, end, holidays)
