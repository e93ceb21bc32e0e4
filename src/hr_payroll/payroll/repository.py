from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import NewPayroll, Payroll, PayrollFilter


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def exists_for_month(self, *, month: int, year: int) -> bool:
        raise NotImplementedError

    def create_many(self, rows: Sequence[NewPayroll]) -> int:
        raise NotImplementedError

    def list(self, criteria: PayrollFilter) -> Sequence[Payroll]:
        raise NotImplementedError

    def mark_approved(self, *, payroll_id: int, approved_by: int, approved_at: datetime) -> bool:
        """-> APPROVED unless LOCKED."""

        raise NotImplementedError

    def mark_locked(self, *, payroll_id: int) -> bool:
        """APPROVED -> LOCKED."""

        raise NotImplementedError

    def save_amounts(self, payroll: Payroll) -> bool:
        """Persist compensation, derived figures and remarks unless LOCKED."""

        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        """Delete unless LOCKED."""

        raise NotImplementedError
