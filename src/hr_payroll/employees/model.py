from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import EmployeeStatus, LeaveType


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee record with compensation and leave balances."""

    id: int
    employee_code: str
    first_name: str
    last_name: str
    email: str
    department: str
    job_title: str
    joining_date: date
    status: EmployeeStatus
    base_salary: Decimal
    travelling_allowance: Decimal
    other_allowances: Decimal
    local_leave_balance: Decimal
    sick_leave_balance: Decimal
    user_id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    def balance_for(self, leave_type: LeaveType) -> Decimal:
        if leave_type == LeaveType.LOCAL:
            return self.local_leave_balance
        return self.sick_leave_balance


@dataclass(frozen=True)
class NewEmployee:
    employee_code: str
    first_name: str
    last_name: str
    email: str
    department: str
    job_title: str
    joining_date: date
    base_salary: Decimal
    travelling_allowance: Decimal
    other_allowances: Decimal
    local_leave_balance: Decimal
    sick_leave_balance: Decimal
    user_id: Optional[int] = None


@dataclass(frozen=True)
class EmployeeFilter:
    status: Optional[EmployeeStatus] = None
    department: Optional[str] = None
    search: Optional[str] = None
