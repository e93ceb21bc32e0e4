from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import iter_days, month_range
from ..common.identity import Actor
from ..common.validators import require_month
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..leaves.model import Leave
from .model import AttendanceFilter, AttendanceRecord, MonthlySummary, NewAttendance, summarize
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Keeps the per-day attendance calendar.

    Leave-backed rows are written and removed only through ``materialize_leave``
    and ``release_leave`` (called by the leave ledger inside its transaction);
    manual edits never touch them.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def materialize_leave(self, leave: Leave) -> None:
        if leave.is_half_day:
            self._materialize_half_day(leave)
            return

        rows = [
            NewAttendance.leave_day(employee_id=leave.employee_id, work_date=d, leave_type=leave.leave_type)
            for d in iter_days(leave.start_date, leave.end_date)
        ]
        inserted = self._attendance.insert_skip_existing(rows)
        logger.debug("leave %s: %d/%d attendance rows created", leave.id, inserted, len(rows))

    def _materialize_half_day(self, leave: Leave) -> None:
        existing = self._attendance.get_for_employee_and_date(leave.employee_id, leave.start_date)
        if existing and not existing.is_leave:
            # A manually recorded day stays as it is, same as the full-day path.
            logger.debug("leave %s: %s already recorded, row kept", leave.id, leave.start_date)
            return

        period = leave.half_day_period
        if existing and existing.is_half_day and existing.half_day_period != leave.half_day_period:
            # Both halves are now on leave.
            period = None

        self._attendance.upsert(
            NewAttendance.leave_day(
                employee_id=leave.employee_id,
                work_date=leave.start_date,
                leave_type=leave.leave_type,
                half_day_period=period,
            )
        )

    def release_leave(self, leave: Leave, *, remaining_half: Optional[Leave] = None) -> None:
        """Undo ``materialize_leave``. ``remaining_half`` is the other approved half of the same day."""
        if leave.is_half_day and remaining_half is not None:
            existing = self._attendance.get_for_employee_and_date(leave.employee_id, leave.start_date)
            if not existing or not existing.is_leave:
                return
            self._attendance.upsert(
                NewAttendance.leave_day(
                    employee_id=remaining_half.employee_id,
                    work_date=remaining_half.start_date,
                    leave_type=remaining_half.leave_type,
                    half_day_period=remaining_half.half_day_period,
                )
            )
            return

        self._attendance.delete_leave_rows(
            employee_id=leave.employee_id,
            start_date=leave.start_date,
            end_date=leave.end_date,
        )

    def mark_absence(self, *, actor: Actor, employee_id: int, work_date: date, remarks: Optional[str] = None) -> AttendanceRecord:
        actor.require_manager()

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")

        existing = self._attendance.get_for_employee_and_date(employee_id, work_date)
        if existing and existing.is_leave:
            raise ConflictError("Employee is on approved leave for this date")

        attendance_id = self._attendance.upsert(
            NewAttendance.absence(employee_id=employee_id, work_date=work_date, remarks=remarks)
        )
        logger.info("absence marked employee=%s date=%s by user=%s", employee_id, work_date, actor.user_id)
        return self._attendance.get_by_id(attendance_id)

    def update_attendance(
        self,
        *,
        actor: Actor,
        attendance_id: int,
        is_present: Optional[bool] = None,
        is_absence: Optional[bool] = None,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        actor.require_manager()

        record = self._attendance.get_by_id(attendance_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if record.is_leave:
            raise ConflictError("Cannot modify attendance for approved leave")

        present = record.is_present if is_present is None else bool(is_present)
        absent = record.is_absence if is_absence is None else bool(is_absence)
        if present and absent:
            raise ValidationError("A day cannot be both present and absent")

        if not self._attendance.update_state(
            attendance_id=attendance_id,
            is_present=present,
            is_absence=absent,
            remarks=remarks if remarks is not None else record.remarks,
        ):
            raise ConflictError("Attendance record changed, please retry")
        return self._attendance.get_by_id(attendance_id)

    def list_attendance(self, *, actor: Actor, criteria: AttendanceFilter) -> Sequence[AttendanceRecord]:
        if not actor.is_manager:
            criteria = AttendanceFilter(
                employee_id=actor.employee_id,
                start_date=criteria.start_date,
                end_date=criteria.end_date,
            )
        return self._attendance.list(criteria)

    def records_between(self, *, employee_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        return self._attendance.list(AttendanceFilter(employee_id=employee_id, start_date=start, end_date=end))

    def monthly_summary(self, *, actor: Actor, employee_id: int, month: int, year: int) -> MonthlySummary:
        if not actor.can_access_employee(employee_id):
            raise AuthorizationError("Unauthorized to view this attendance")
        month, year = require_month(month, year)
        start, end = month_range(month, year)
        records = self.records_between(employee_id=employee_id, start=start, end=end)
        return MonthlySummary(
            employee_id=employee_id,
            month=month,
            year=year,
            counts=summarize(records),
            records=tuple(records),
        )
