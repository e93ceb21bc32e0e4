from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class Compensation:
    base_salary: Decimal
    travelling_allowance: Decimal
    other_allowances: Decimal


@dataclass(frozen=True)
class PayrollFigures:
    """Derived amounts, all rounded to cents."""

    travelling_deduction: Decimal
    total_deductions: Decimal
    gross_salary: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class Payroll:
    """Domain entity: one employee's salary for one month, snapshotted at calculation time."""

    id: int
    employee_id: int
    month: int
    year: int
    working_days: int
    present_days: int
    leave_days: int
    absence_days: int
    base_salary: Decimal
    travelling_allowance: Decimal
    other_allowances: Decimal
    travelling_deduction: Decimal
    total_deductions: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    status: PayrollStatus
    remarks: Optional[str] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None

    @property
    def compensation(self) -> Compensation:
        return Compensation(
            base_salary=self.base_salary,
            travelling_allowance=self.travelling_allowance,
            other_allowances=self.other_allowances,
        )

    @property
    def is_locked(self) -> bool:
        return self.status == PayrollStatus.LOCKED


@dataclass(frozen=True)
class NewPayroll:
    employee_id: int
    month: int
    year: int
    working_days: int
    present_days: int
    leave_days: int
    absence_days: int
    compensation: Compensation
    figures: PayrollFigures


@dataclass(frozen=True)
class PayrollFilter:
    employee_id: Optional[int] = None
    month: Optional[int] = None
    year: Optional[int] = None
    status: Optional[PayrollStatus] = None
