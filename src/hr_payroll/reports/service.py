from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..attendance.model import summarize
from ..attendance.service import AttendanceService
from ..common.datetime_utils import month_range, today_local
from ..common.identity import Actor
from ..common.validators import require_month
from ..core.enums import EmployeeStatus, LeaveStatus, LeaveType
from ..employees.model import Employee, EmployeeFilter
from ..employees.repository import EmployeeRepository
from ..leaves.model import LeaveFilter
from ..leaves.repository import LeaveRepository
from ..payroll.model import PayrollFilter
from ..payroll.repository import PayrollRepository

_MONEY_FIELDS = (
    "base_salary",
    "travelling_allowance",
    "other_allowances",
    "total_deductions",
    "gross_salary",
    "net_salary",
)


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class ReportService:
    """Read-only aggregations for managers."""

    def __init__(
        self,
        employees: EmployeeRepository,
        leaves: LeaveRepository,
        attendance: AttendanceService,
        payrolls: PayrollRepository,
    ):
        self._employees = employees
        self._leaves = leaves
        self._attendance = attendance
        self._payrolls = payrolls

    def _employees_by_id(self) -> dict[int, Employee]:
        return {e.id: e for e in self._employees.list(EmployeeFilter())}

    def leave_report(self, *, actor: Actor, criteria: LeaveFilter) -> ReportData:
        actor.require_manager()
        employees = self._employees_by_id()
        leaves = self._leaves.list(criteria)

        by_status = {status.value: 0 for status in LeaveStatus}
        by_type = {leave_type.value: Decimal("0") for leave_type in LeaveType}
        by_department: dict[str, int] = defaultdict(int)
        total_days = Decimal("0")
        rows: list[dict] = []

        for leave in leaves:
            employee = employees.get(leave.employee_id)
            department = employee.department if employee else "-"
            by_status[leave.status.value] += 1
            by_type[leave.leave_type.value] += leave.total_days
            by_department[department] += 1
            total_days += leave.total_days
            rows.append(
                {
                    "leave_id": leave.id,
                    "employee_id": leave.employee_id,
                    "employee_name": employee.full_name if employee else "-",
                    "department": department,
                    "leave_type": leave.leave_type.value,
                    "start_date": leave.start_date.isoformat(),
                    "end_date": leave.end_date.isoformat(),
                    "total_days": leave.total_days,
                    "status": leave.status.value,
                }
            )

        return ReportData(
            rows=rows,
            summary={
                "total_leaves": len(leaves),
                "total_days": total_days,
                "by_status": by_status,
                "by_type": by_type,
                "by_department": dict(by_department),
            },
        )

    def attendance_report(
        self,
        *,
        actor: Actor,
        month: int,
        year: int,
        department: Optional[str] = None,
        employee_id: Optional[int] = None,
    ) -> ReportData:
        actor.require_manager()
        month, year = require_month(month, year)
        start, end = month_range(month, year)

        employees = self._employees.list(EmployeeFilter(status=EmployeeStatus.ACTIVE, department=department))
        if employee_id is not None:
            employees = [e for e in employees if e.id == int(employee_id)]

        rows: list[dict] = []
        totals: dict[str, int] = defaultdict(int)
        for employee in employees:
            counts = summarize(self._attendance.records_between(employee_id=employee.id, start=start, end=end))
            row = {
                "employee_id": employee.id,
                "employee_code": employee.employee_code,
                "employee_name": employee.full_name,
                "department": employee.department,
                "total_days": counts.total_days,
                "present_days": counts.present_days,
                "leave_days": counts.leave_days,
                "local_leave_days": counts.local_leave_days,
                "sick_leave_days": counts.sick_leave_days,
                "absence_days": counts.absence_days,
            }
            rows.append(row)
            for key in ("present_days", "leave_days", "absence_days"):
                totals[key] += row[key]

        return ReportData(
            rows=rows,
            summary={"month": month, "year": year, "employees": len(rows), **totals},
        )

    def payroll_report(self, *, actor: Actor, criteria: PayrollFilter) -> ReportData:
        actor.require_manager()
        employees = self._employees_by_id()
        payrolls = self._payrolls.list(criteria)

        totals = {name: Decimal("0") for name in _MONEY_FIELDS}
        by_department: dict[str, dict] = {}
        rows: list[dict] = []

        for payroll in payrolls:
            employee = employees.get(payroll.employee_id)
            department = employee.department if employee else "-"
            for name in _MONEY_FIELDS:
                totals[name] += getattr(payroll, name)

            dept = by_department.setdefault(department, {"count": 0, "gross_salary": Decimal("0"), "net_salary": Decimal("0")})
            dept["count"] += 1
            dept["gross_salary"] += payroll.gross_salary
            dept["net_salary"] += payroll.net_salary

            rows.append(
                {
                    "payroll_id": payroll.id,
                    "employee_id": payroll.employee_id,
                    "employee_name": employee.full_name if employee else "-",
                    "department": department,
                    "month": payroll.month,
                    "year": payroll.year,
                    "absence_days": payroll.absence_days,
                    "gross_salary": payroll.gross_salary,
                    "total_deductions": payroll.total_deductions,
                    "net_salary": payroll.net_salary,
                    "status": payroll.status.value,
                }
            )

        return ReportData(
            rows=rows,
            summary={"count": len(payrolls), "totals": totals, "by_department": by_department},
        )

    def dashboard(self, *, actor: Actor, today: Optional[date] = None) -> dict:
        actor.require_manager()
        today = today or today_local()
        current = self._payrolls.list(PayrollFilter(month=today.month, year=today.year))
        return {
            "active_employees": sum(self._employees.count_by_department(EmployeeStatus.ACTIVE).values()),
            "on_leave_today": self._leaves.count(LeaveFilter(status=LeaveStatus.APPROVED, on_date=today)),
            "pending_leaves": self._leaves.count(LeaveFilter(status=LeaveStatus.PENDING)),
            "current_month_payrolls": len(current),
            "current_month_net_total": sum((p.net_salary for p in current), Decimal("0")),
        }
