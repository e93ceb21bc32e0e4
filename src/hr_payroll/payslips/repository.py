from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewPayslip, Payslip, PayslipSummary


class PayslipRepository(Protocol):
    def upsert(self, new: NewPayslip) -> int:
        raise NotImplementedError

    def get_by_payroll_id(self, payroll_id: int) -> Optional[Payslip]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: int) -> Sequence[PayslipSummary]:
        """Newest pay period first."""
        raise NotImplementedError
