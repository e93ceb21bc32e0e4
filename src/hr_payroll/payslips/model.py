from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ..core.enums import PayrollStatus
from ..payroll.model import Payroll


@dataclass(frozen=True)
class PayslipEmployee:
    employee_code: str
    first_name: str
    last_name: str
    email: str
    department: str
    job_title: str


@dataclass(frozen=True)
class PayslipCompany:
    name: str
    address: str
    phone: str
    email: str


@dataclass(frozen=True)
class PayslipData:
    """Everything a renderer needs to lay out one payslip."""

    employee: PayslipEmployee
    payroll: Payroll
    company: PayslipCompany


@dataclass(frozen=True)
class NewPayslip:
    payroll_id: int
    employee_id: int
    file_name: str
    generated_at: datetime


@dataclass(frozen=True)
class Payslip:
    """One record per payroll; regenerating refreshes ``file_name`` and ``generated_at``."""

    id: int
    payroll_id: int
    employee_id: int
    file_name: str
    generated_at: datetime


@dataclass(frozen=True)
class PayslipSummary:
    payslip: Payslip
    month: int
    year: int
    net_salary: Decimal
    status: PayrollStatus


@dataclass(frozen=True)
class GeneratedPayslip:
    payslip: Payslip
    data: PayslipData
