from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import HalfDayPeriod, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import AttendanceFilter, AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

_COLUMNS = """
    id, employee_id, date, is_present, is_leave, is_absence, leave_type, is_half_day, half_day_period, remarks
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["date"],
        is_present=bool(r["is_present"]),
        is_leave=bool(r["is_leave"]),
        is_absence=bool(r["is_absence"]),
        leave_type=LeaveType(r["leave_type"]) if r.get("leave_type") else None,
        is_half_day=bool(r.get("is_half_day")),
        half_day_period=HalfDayPeriod(r["half_day_period"]) if r.get("half_day_period") else None,
        remarks=r.get("remarks"),
    )


def _params(record: NewAttendance) -> tuple:
    return (
        int(record.employee_id),
        record.work_date,
        int(record.is_present),
        int(record.is_leave),
        int(record.is_absence),
        record.leave_type.value if record.leave_type else None,
        int(record.is_half_day),
        record.half_day_period.value if record.half_day_period else None,
        record.remarks,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE employee_id=%s AND date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list(self, criteria: AttendanceFilter) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if criteria.employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(criteria.employee_id))
        if criteria.start_date is not None:
            clauses.append("date >= %s")
            params.append(criteria.start_date)
        if criteria.end_date is not None:
            clauses.append("date <= %s")
            params.append(criteria.end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance {where_clause(clauses)} ORDER BY date DESC, employee_id ASC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def insert_skip_existing(self, records: Sequence[NewAttendance]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT IGNORE INTO attendance(
                    employee_id, date, is_present, is_leave, is_absence,
                    leave_type, is_half_day, half_day_period, remarks
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [_params(r) for r in records],
            )
            return int(cur.rowcount or 0)

    def upsert(self, record: NewAttendance) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(
                    employee_id, date, is_present, is_leave, is_absence,
                    leave_type, is_half_day, half_day_period, remarks
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    id=LAST_INSERT_ID(id),
                    is_present=VALUES(is_present),
                    is_leave=VALUES(is_leave),
                    is_absence=VALUES(is_absence),
                    leave_type=VALUES(leave_type),
                    is_half_day=VALUES(is_half_day),
                    half_day_period=VALUES(half_day_period),
                    remarks=VALUES(remarks)
                """,
                _params(record),
            )
            return int(cur.lastrowid)

    def update_state(
        self,
        *,
        attendance_id: int,
        is_present: bool,
        is_absence: bool,
        remarks: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET is_present=%s, is_absence=%s, remarks=%s
                WHERE id=%s AND is_leave=0
                """,
                (int(is_present), int(is_absence), remarks, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete_leave_rows(self, *, employee_id: int, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                DELETE FROM attendance
                WHERE employee_id=%s AND date BETWEEN %s AND %s AND is_leave=1
                """,
                (int(employee_id), start_date, end_date),
            )
            return int(cur.rowcount or 0)
