from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceFilter, AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list(self, criteria: AttendanceFilter) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def insert_skip_existing(self, records: Sequence[NewAttendance]) -> int:
        """Bulk insert; rows whose (employee, date) already exists are left untouched."""

        raise NotImplementedError

    def upsert(self, record: NewAttendance) -> int:
        """Insert or overwrite the state of the (employee, date) row. Returns its id."""

        raise NotImplementedError

    def update_state(
        self,
        *,
        attendance_id: int,
        is_present: bool,
        is_absence: bool,
        remarks: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_leave_rows(self, *, employee_id: int, start_date: date, end_date: date) -> int:
        """Delete rows with is_leave=1 in [start_date, end_date]."""

        raise NotImplementedError
