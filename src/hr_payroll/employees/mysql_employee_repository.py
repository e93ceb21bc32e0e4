from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import EmployeeStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Employee, EmployeeFilter, NewEmployee
from .repository import EmployeeRepository

_COLUMNS = """
    id, employee_code, first_name, last_name, email, department, job_title, joining_date, status,
    base_salary, travelling_allowance, other_allowances, local_leave_balance, sick_leave_balance, user_id
"""

_BALANCE_COLUMN = {
    LeaveType.LOCAL: "local_leave_balance",
    LeaveType.SICK: "sick_leave_balance",
}


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        id=int(r["id"]),
        employee_code=r["employee_code"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r["email"],
        department=r["department"],
        job_title=r["job_title"],
        joining_date=r["joining_date"],
        status=EmployeeStatus(r["status"]),
        base_salary=Decimal(r["base_salary"]),
        travelling_allowance=Decimal(r["travelling_allowance"]),
        other_allowances=Decimal(r["other_allowances"]),
        local_leave_balance=Decimal(r["local_leave_balance"]),
        sick_leave_balance=Decimal(r["sick_leave_balance"]),
        user_id=r.get("user_id"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value: Any) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE {column}=%s", (value,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._get_one("id", int(employee_id))

    def get_by_code(self, employee_code: str) -> Optional[Employee]:
        return self._get_one("employee_code", employee_code)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._get_one("email", email)

    def get_by_user_id(self, user_id: int) -> Optional[Employee]:
        return self._get_one("user_id", int(user_id))

    def create(self, new: NewEmployee) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    employee_code, first_name, last_name, email, department, job_title, joining_date, status,
                    base_salary, travelling_allowance, other_allowances,
                    local_leave_balance, sick_leave_balance, user_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    new.employee_code,
                    new.first_name,
                    new.last_name,
                    new.email,
                    new.department,
                    new.job_title,
                    new.joining_date,
                    EmployeeStatus.ACTIVE.value,
                    new.base_salary,
                    new.travelling_allowance,
                    new.other_allowances,
                    new.local_leave_balance,
                    new.sick_leave_balance,
                    new.user_id,
                ),
            )
            return int(cur.lastrowid)

    def save(self, employee: Employee) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET employee_code=%s, first_name=%s, last_name=%s, email=%s, department=%s, job_title=%s,
                    joining_date=%s, status=%s, base_salary=%s, travelling_allowance=%s, other_allowances=%s,
                    local_leave_balance=%s, sick_leave_balance=%s
                WHERE id=%s
                """,
                (
                    employee.employee_code,
                    employee.first_name,
                    employee.last_name,
                    employee.email,
                    employee.department,
                    employee.job_title,
                    employee.joining_date,
                    employee.status.value,
                    employee.base_salary,
                    employee.travelling_allowance,
                    employee.other_allowances,
                    employee.local_leave_balance,
                    employee.sick_leave_balance,
                    employee.id,
                ),
            )
            return cur.rowcount > 0

    def set_status(self, employee_id: int, status: EmployeeStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET status=%s WHERE id=%s", (status.value, int(employee_id)))
            return cur.rowcount > 0

    def list(self, criteria: EmployeeFilter) -> Sequence[Employee]:
        clauses: list[str] = []
        params: list[object] = []

        if criteria.status is not None:
            clauses.append("status=%s")
            params.append(criteria.status.value)
        if criteria.department:
            clauses.append("department=%s")
            params.append(criteria.department)
        if criteria.search:
            like = f"%{criteria.search}%"
            clauses.append("(first_name LIKE %s OR last_name LIKE %s OR email LIKE %s OR employee_code LIKE %s)")
            params.extend([like, like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees {where_clause(clauses)} ORDER BY created_at DESC, id DESC",
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def debit_balance(self, employee_id: int, leave_type: LeaveType, days: Decimal) -> bool:
        column = _BALANCE_COLUMN[leave_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {column} = {column} - %s WHERE id=%s AND {column} >= %s",
                (days, int(employee_id), days),
            )
            return cur.rowcount > 0

    def credit_balance(self, employee_id: int, leave_type: LeaveType, days: Decimal) -> bool:
        column = _BALANCE_COLUMN[leave_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {column} = {column} + %s WHERE id=%s", (days, int(employee_id)))
            return cur.rowcount > 0

    def count_by_department(self, status: EmployeeStatus) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT department, COUNT(*) AS cnt FROM employees WHERE status=%s GROUP BY department",
                (status.value,),
            )
            return {r["department"]: int(r["cnt"]) for r in fetchall(cur)}
