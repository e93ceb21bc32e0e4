from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import NewPayroll, Payroll, PayrollFilter
from .repository import PayrollRepository

_COLUMNS = """
    id, employee_id, month, year, working_days, present_days, leave_days, absence_days,
    base_salary, travelling_allowance, other_allowances, travelling_deduction,
    total_deductions, gross_salary, net_salary, status, remarks, approved_by, approved_at
"""


def _to_payroll(r: Dict[str, Any]) -> Payroll:
    return Payroll(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        working_days=int(r["working_days"]),
        present_days=int(r["present_days"]),
        leave_days=int(r["leave_days"]),
        absence_days=int(r["absence_days"]),
        base_salary=Decimal(r["base_salary"]),
        travelling_allowance=Decimal(r["travelling_allowance"]),
        other_allowances=Decimal(r["other_allowances"]),
        travelling_deduction=Decimal(r["travelling_deduction"]),
        total_deductions=Decimal(r["total_deductions"]),
        gross_salary=Decimal(r["gross_salary"]),
        net_salary=Decimal(r["net_salary"]),
        status=PayrollStatus(r["status"]),
        remarks=r.get("remarks"),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def exists_for_month(self, *, month: int, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM payrolls WHERE month=%s AND year=%s LIMIT 1", (int(month), int(year)))
            return fetchone(cur) is not None

    def create_many(self, rows: Sequence[NewPayroll]) -> int:
        if not rows:
            return 0
        values = [
            (
                int(row.employee_id),
                int(row.month),
                int(row.year),
                int(row.working_days),
                int(row.present_days),
                int(row.leave_days),
                int(row.absence_days),
                row.compensation.base_salary,
                row.compensation.travelling_allowance,
                row.compensation.other_allowances,
                row.figures.travelling_deduction,
                row.figures.total_deductions,
                row.figures.gross_salary,
                row.figures.net_salary,
                PayrollStatus.DRAFT.value,
            )
            for row in rows
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO payrolls(
                    employee_id, month, year, working_days, present_days, leave_days, absence_days,
                    base_salary, travelling_allowance, other_allowances, travelling_deduction,
                    total_deductions, gross_salary, net_salary, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                values,
            )
            return len(values)

    def list(self, criteria: PayrollFilter) -> Sequence[Payroll]:
        clauses: list[str] = []
        params: list[object] = []
        if criteria.employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(criteria.employee_id))
        if criteria.month is not None:
            clauses.append("month=%s")
            params.append(int(criteria.month))
        if criteria.year is not None:
            clauses.append("year=%s")
            params.append(int(criteria.year))
        if criteria.status is not None:
            clauses.append("status=%s")
            params.append(criteria.status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls {where_clause(clauses)} ORDER BY year DESC, month DESC, employee_id",
                tuple(params),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def mark_approved(self, *, payroll_id: int, approved_by: int, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payrolls
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE id=%s AND status <> %s
                """,
                (
                    PayrollStatus.APPROVED.value,
                    int(approved_by),
                    approved_at,
                    int(payroll_id),
                    PayrollStatus.LOCKED.value,
                ),
            )
            return cur.rowcount > 0

    def mark_locked(self, *, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payrolls SET status=%s WHERE id=%s AND status=%s",
                (PayrollStatus.LOCKED.value, int(payroll_id), PayrollStatus.APPROVED.value),
            )
            return cur.rowcount > 0

    def save_amounts(self, payroll: Payroll) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payrolls
                SET base_salary=%s, travelling_allowance=%s, other_allowances=%s,
                    travelling_deduction=%s, total_deductions=%s, gross_salary=%s,
                    net_salary=%s, remarks=%s
                WHERE id=%s AND status <> %s
                """,
                (
                    payroll.base_salary,
                    payroll.travelling_allowance,
                    payroll.other_allowances,
                    payroll.travelling_deduction,
                    payroll.total_deductions,
                    payroll.gross_salary,
                    payroll.net_salary,
                    payroll.remarks,
                    int(payroll.id),
                    PayrollStatus.LOCKED.value,
                ),
            )
            return cur.rowcount > 0

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM payrolls WHERE id=%s AND status <> %s",
                (int(payroll_id), PayrollStatus.LOCKED.value),
            )
            return cur.rowcount > 0
