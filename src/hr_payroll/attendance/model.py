from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Sequence

from ..core.enums import HalfDayPeriod, LeaveType


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: the state of one employee on one day.

    ``is_present``, ``is_leave`` and ``is_absence`` are mutually exclusive.
    """

    id: int
    employee_id: int
    work_date: date
    is_present: bool
    is_leave: bool
    is_absence: bool
    leave_type: Optional[LeaveType] = None
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None
    remarks: Optional[str] = None


@dataclass(frozen=True)
class NewAttendance:
    employee_id: int
    work_date: date
    is_present: bool = False
    is_leave: bool = False
    is_absence: bool = False
    leave_type: Optional[LeaveType] = None
    is_half_day: bool = False
    half_day_period: Optional[HalfDayPeriod] = None
    remarks: Optional[str] = None

    @classmethod
    def leave_day(
        cls,
        *,
        employee_id: int,
        work_date: date,
        leave_type: LeaveType,
        half_day_period: Optional[HalfDayPeriod] = None,
    ) -> "NewAttendance":
        return cls(
            employee_id=employee_id,
            work_date=work_date,
            is_leave=True,
            leave_type=leave_type,
            is_half_day=half_day_period is not None,
            half_day_period=half_day_period,
        )

    @classmethod
    def absence(cls, *, employee_id: int, work_date: date, remarks: Optional[str] = None) -> "NewAttendance":
        return cls(employee_id=employee_id, work_date=work_date, is_absence=True, remarks=remarks)


@dataclass(frozen=True)
class AttendanceFilter:
    employee_id: Optional[int] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class AttendanceCounts:
    """Monthly aggregate. A half-day leave row still counts as one leave day."""

    total_days: int = 0
    present_days: int = 0
    leave_days: int = 0
    local_leave_days: int = 0
    sick_leave_days: int = 0
    absence_days: int = 0


@dataclass(frozen=True)
class MonthlySummary:
    employee_id: int
    month: int
    year: int
    counts: AttendanceCounts
    records: Sequence[AttendanceRecord] = field(default_factory=tuple)


def summarize(records: Sequence[AttendanceRecord]) -> AttendanceCounts:
    return AttendanceCounts(
        total_days=len(records),
        present_days=sum(1 for r in records if r.is_present),
        leave_days=sum(1 for r in records if r.is_leave),
        local_leave_days=sum(1 for r in records if r.is_leave and r.leave_type == LeaveType.LOCAL),
        sick_leave_days=sum(1 for r in records if r.is_leave and r.leave_type == LeaveType.SICK),
        absence_days=sum(1 for r in records if r.is_absence),
    )
