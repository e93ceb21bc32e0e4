from __future__ import annotations

from datetime import date

import pytest

from hr_payroll.attendance.model import AttendanceFilter
from hr_payroll.core.enums import LeaveType
from hr_payroll.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from hr_payroll.leaves.model import LeaveApplication
from tests.fakes import EMPLOYER, build_world, employee_actor


@pytest.fixture()
def world():
    return build_world()


def _approve_leave(world, emp, start, end, leave_type=LeaveType.LOCAL):
    leaves = world.container.leave_service
    leave = leaves.apply(
        actor=employee_actor(emp),
        application=LeaveApplication(leave_type=leave_type, start_date=start, end_date=end, reason="Trip"),
    )
    return leaves.approve(actor=EMPLOYER, leave_id=leave.id)


def test_mark_absence_creates_then_overwrites_the_day(world):
    svc = world.container.attendance_service
    emp = world.add_employee()

    first = svc.mark_absence(actor=EMPLOYER, employee_id=emp.id, work_date=date(2026, 6, 3), remarks="No show")
    again = svc.mark_absence(actor=EMPLOYER, employee_id=emp.id, work_date=date(2026, 6, 3), remarks="Still absent")

    assert first.id == again.id
    assert again.is_absence and not again.is_present and not again.is_leave
    assert again.remarks == "Still absent"
    assert len(world.attendance_repo.rows) == 1


def test_mark_absence_on_leave_day_conflicts(world):
    svc = world.container.attendance_service
    emp = world.add_employee()
    _approve_leave(world, emp, date(2026, 6, 10), date(2026, 6, 10))

    with pytest.raises(ConflictError):
        svc.mark_absence(actor=EMPLOYER, employee_id=emp.id, work_date=date(2026, 6, 10))


def test_mark_absence_requires_manager_and_known_employee(world):
    svc = world.container.attendance_service
    emp = world.add_employee()

    with pytest.raises(AuthorizationError):
        svc.mark_absence(actor=employee_actor(emp), employee_id=emp.id, work_date=date(2026, 6, 3))
    with pytest.raises(NotFoundError):
        svc.mark_absence(actor=EMPLOYER, employee_id=999, work_date=date(2026, 6, 3))


def test_update_attendance_flips_state_but_never_touches_leave_rows(world):
    svc = world.container.attendance_service
    emp = world.add_employee()
    absent = svc.mark_absence(actor=EMPLOYER, employee_id=emp.id, work_date=date(2026, 6, 3))

    present = svc.update_attendance(actor=EMPLOYER, attendance_id=absent.id, is_present=True, is_absence=False)
    assert present.is_present and not present.is_absence

    with pytest.raises(ValidationError):
        svc.update_attendance(actor=EMPLOYER, attendance_id=absent.id, is_present=True, is_absence=True)

    _approve_leave(world, emp, date(2026, 6, 10), date(2026, 6, 10))
    leave_row = world.attendance_repo.get_for_employee_and_date(emp.id, date(2026, 6, 10))
    with pytest.raises(ConflictError):
        svc.update_attendance(actor=EMPLOYER, attendance_id=leave_row.id, is_present=True)


def test_monthly_summary_counts_each_kind(world):
    svc = world.container.attendance_service
    emp = world.add_employee()
    _approve_leave(world, emp, date(2026, 6, 10), date(2026, 6, 11))
    _approve_leave(world, emp, date(2026, 6, 15), date(2026, 6, 15), leave_type=LeaveType.SICK)
    svc.mark_absence(actor=EMPLOYER, employee_id=emp.id, work_date=date(2026, 6, 3))
    svc.mark_absence(actor=EMPLOYER, employee_id=emp.id, work_date=date(2026, 7, 1))

    summary = svc.monthly_summary(actor=employee_actor(emp), employee_id=emp.id, month=6, year=2026)

    assert summary.counts.total_days == 4
    assert summary.counts.leave_days == 3
    assert summary.counts.local_leave_days == 2
    assert summary.counts.sick_leave_days == 1
    assert summary.counts.absence_days == 1
    assert summary.counts.present_days == 0


def test_employees_only_see_their_own_attendance(world):
    svc = world.container.attendance_service
    a = world.add_employee()
    b = world.add_employee()
    svc.mark_absence(actor=EMPLOYER, employee_id=a.id, work_date=date(2026, 6, 3))
    svc.mark_absence(actor=EMPLOYER, employee_id=b.id, work_date=date(2026, 6, 3))

    rows = svc.list_attendance(actor=employee_actor(a), criteria=AttendanceFilter(employee_id=b.id))
    assert [r.employee_id for r in rows] == [a.id]

    with pytest.raises(AuthorizationError):
        svc.monthly_summary(actor=employee_actor(a), employee_id=b.id, month=6, year=2026)
