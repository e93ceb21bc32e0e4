from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from .model import Leave, LeaveFilter, NewLeave


class LeaveRepository(Protocol):
    def get_by_id(self, leave_id: int) -> Optional[Leave]:
        raise NotImplementedError

    def create(self, new: NewLeave) -> int:
        raise NotImplementedError

    def find_active_in_range(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        exclude_id: Optional[int] = None,
    ) -> Sequence[Leave]:
        """PENDING/APPROVED leaves of the employee whose range intersects [start_date, end_date]."""

        raise NotImplementedError

    def mark_approved(self, *, leave_id: int, approved_by: int, approved_at: datetime) -> bool:
        """PENDING -> APPROVED. False when the leave is no longer PENDING."""

        raise NotImplementedError

    def mark_rejected(self, *, leave_id: int, rejected_by: int, rejected_at: datetime, reason: str) -> bool:
        raise NotImplementedError

    def update_pending(self, leave: Leave) -> bool:
        """Rewrite type/dates/days/half-day/reason of a PENDING leave."""

        raise NotImplementedError

    def delete(self, leave_id: int) -> bool:
        raise NotImplementedError

    def list(self, criteria: LeaveFilter, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[Leave]:
        raise NotImplementedError

    def count(self, criteria: LeaveFilter) -> int:
        raise NotImplementedError
