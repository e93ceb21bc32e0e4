from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import NewPayslip, Payslip, PayslipSummary
from .repository import PayslipRepository


def _to_payslip(r: Dict[str, Any]) -> Payslip:
    return Payslip(
        id=int(r["id"]),
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        file_name=r["file_name"],
        generated_at=r["generated_at"],
    )


class MySQLPayslipRepository(PayslipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, new: NewPayslip) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payslips(payroll_id, employee_id, file_name, generated_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    id=LAST_INSERT_ID(id),
                    file_name=VALUES(file_name),
                    generated_at=VALUES(generated_at)
                """,
                (int(new.payroll_id), int(new.employee_id), new.file_name, new.generated_at),
            )
            return int(cur.lastrowid)

    def get_by_payroll_id(self, payroll_id: int) -> Optional[Payslip]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, payroll_id, employee_id, file_name, generated_at FROM payslips WHERE payroll_id=%s",
                (int(payroll_id),),
            )
            r = fetchone(cur)
            return _to_payslip(r) if r else None

    def list_for_employee(self, employee_id: int) -> Sequence[PayslipSummary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.id, s.payroll_id, s.employee_id, s.file_name, s.generated_at,
                       p.month, p.year, p.net_salary, p.status
                FROM payslips s
                JOIN payrolls p ON p.id = s.payroll_id
                WHERE s.employee_id=%s
                ORDER BY p.year DESC, p.month DESC
                """,
                (int(employee_id),),
            )
            return [
                PayslipSummary(
                    payslip=_to_payslip(r),
                    month=int(r["month"]),
                    year=int(r["year"]),
                    net_salary=Decimal(r["net_salary"]),
                    status=PayrollStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]
