from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import HalfDayPeriod, LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Leave, LeaveFilter, NewLeave
from .repository import LeaveRepository

_COLUMNS = """
    id, employee_id, leave_type, start_date, end_date, total_days, reason, status,
    is_half_day, half_day_period, is_urgent, approved_by, approved_at,
    rejected_by, rejected_at, rejection_reason, created_at
"""


def _to_leave(r: Dict[str, Any]) -> Leave:
    return Leave(
        id=int(r["id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=Decimal(r["total_days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        is_half_day=bool(r.get("is_half_day")),
        half_day_period=HalfDayPeriod(r["half_day_period"]) if r.get("half_day_period") else None,
        is_urgent=bool(r.get("is_urgent")),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejected_by=r.get("rejected_by"),
        rejected_at=r.get("rejected_at"),
        rejection_reason=r.get("rejection_reason"),
        created_at=r.get("created_at"),
    )


def _filter_clauses(criteria: LeaveFilter) -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []

    if criteria.employee_id is not None:
        clauses.append("employee_id=%s")
        params.append(int(criteria.employee_id))
    if criteria.status is not None:
        clauses.append("status=%s")
        params.append(criteria.status.value)
    if criteria.leave_type is not None:
        clauses.append("leave_type=%s")
        params.append(criteria.leave_type.value)
    if criteria.start_from is not None:
        clauses.append("start_date >= %s")
        params.append(criteria.start_from)
    if criteria.end_to is not None:
        clauses.append("end_date <= %s")
        params.append(criteria.end_to)
    if criteria.on_date is not None:
        clauses.append("start_date <= %s AND end_date >= %s")
        params.extend([criteria.on_date, criteria.on_date])
    return clauses, params


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, leave_id: int) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leaves WHERE id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def create(self, new: NewLeave) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(
                    employee_id, leave_type, start_date, end_date, total_days, reason, status,
                    is_half_day, half_day_period, is_urgent, approved_by, approved_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(new.employee_id),
                    new.leave_type.value,
                    new.start_date,
                    new.end_date,
                    new.total_days,
                    new.reason,
                    new.status.value,
                    int(new.is_half_day),
                    new.half_day_period.value if new.half_day_period else None,
                    int(new.is_urgent),
                    new.approved_by,
                    new.approved_at,
                ),
            )
            return int(cur.lastrowid)

    def find_active_in_range(
        self,
        *,
        employee_id: int,
        start_date: date,
        end_date: date,
        exclude_id: Optional[int] = None,
    ) -> Sequence[Leave]:
        clauses = [
            "employee_id=%s",
            "status IN (%s, %s)",
            "start_date <= %s",
            "end_date >= %s",
        ]
        params: list[object] = [
            int(employee_id),
            LeaveStatus.PENDING.value,
            LeaveStatus.APPROVED.value,
            end_date,
            start_date,
        ]
        if exclude_id is not None:
            clauses.append("id <> %s")
            params.append(int(exclude_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leaves {where_clause(clauses)} ORDER BY start_date",
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def mark_approved(self, *, leave_id: int, approved_by: int, approved_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE id=%s AND status=%s
                """,
                (LeaveStatus.APPROVED.value, int(approved_by), approved_at, int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def mark_rejected(self, *, leave_id: int, rejected_by: int, rejected_at: datetime, reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET status=%s, rejected_by=%s, rejected_at=%s, rejection_reason=%s
                WHERE id=%s AND status=%s
                """,
                (
                    LeaveStatus.REJECTED.value,
                    int(rejected_by),
                    rejected_at,
                    reason,
                    int(leave_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def update_pending(self, leave: Leave) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leaves
                SET leave_type=%s, start_date=%s, end_date=%s, total_days=%s,
                    is_half_day=%s, half_day_period=%s, reason=%s
                WHERE id=%s AND status=%s
                """,
                (
                    leave.leave_type.value,
                    leave.start_date,
                    leave.end_date,
                    leave.total_days,
                    int(leave.is_half_day),
                    leave.half_day_period.value if leave.half_day_period else None,
                    leave.reason,
                    int(leave.id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def delete(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leaves WHERE id=%s", (int(leave_id),))
            return cur.rowcount > 0

    def list(self, criteria: LeaveFilter, *, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[Leave]:
        clauses, params = _filter_clauses(criteria)
        params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leaves {where_clause(clauses)} ORDER BY created_at DESC, id DESC LIMIT %s",
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def count(self, criteria: LeaveFilter) -> int:
        clauses, params = _filter_clauses(criteria)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS cnt FROM leaves {where_clause(clauses)}", tuple(params))
            r = fetchone(cur)
            return int(r["cnt"]) if r else 0
