from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from hr_payroll.core.constants import WORKING_DAYS_PER_MONTH
from hr_payroll.core.enums import EmployeeStatus, LeaveType, PayrollStatus
from hr_payroll.core.exceptions import AuthorizationError, ConflictError, InvalidStateError, ValidationError
from hr_payroll.leaves.model import LeaveApplication
from hr_payroll.payroll.model import PayrollFilter
from tests.fakes import ADMIN, EMPLOYER, build_world, employee_actor


@pytest.fixture()
def world():
    return build_world(config={WORKING_DAYS_PER_MONTH: "22"})


def _absent(world, emp, *days):
    for day in days:
        world.container.attendance_service.mark_absence(actor=EMPLOYER, employee_id=emp.id, work_date=day)


def test_process_snapshots_compensation_and_deducts_absences(world):
    emp = world.add_employee()
    _absent(world, emp, date(2026, 5, 4), date(2026, 5, 5))

    rows = world.container.payroll_service.process(actor=ADMIN, month=5, year=2026)

    assert len(rows) == 1
    p = rows[0]
    assert p.status == PayrollStatus.DRAFT
    assert p.working_days == 22
    assert p.absence_days == 2
    assert p.travelling_deduction == Decimal("40.00")
    assert p.gross_salary == Decimal("5540.00")
    assert p.net_salary == Decimal("5500.00")
    assert "PROCESS_PAYROLL" in world.audit_repo.actions


def test_leave_days_are_paid(world):
    emp = world.add_employee()
    world.container.leave_service.add_urgent_leave(
        actor=ADMIN,
        employee_id=emp.id,
        application=LeaveApplication(
            leave_type=LeaveType.SICK,
            start_date=date(2026, 5, 11),
            end_date=date(2026, 5, 12),
            reason="Flu",
        ),
    )

    (p,) = world.container.payroll_service.process(actor=ADMIN, month=5, year=2026)

    assert p.leave_days == 2
    assert p.absence_days == 0
    assert p.total_deductions == Decimal("0.00")


def test_process_skips_inactive_employees_and_uses_configured_working_days():
    world = build_world(config={WORKING_DAYS_PER_MONTH: "20"})
    active = world.add_employee(travelling_allowance=Decimal("400"))
    gone = world.add_employee()
    world.employees_repo.set_status(gone.id, EmployeeStatus.INACTIVE)
    _absent(world, active, date(2026, 5, 4))

    rows = world.container.payroll_service.process(actor=ADMIN, month=5, year=2026)

    assert [p.employee_id for p in rows] == [active.id]
    assert rows[0].travelling_deduction == Decimal("20.00")


def test_process_twice_for_the_same_month_conflicts(world):
    world.add_employee()
    world.container.payroll_service.process(actor=ADMIN, month=5, year=2026)

    with pytest.raises(ConflictError):
        world.container.payroll_service.process(actor=ADMIN, month=5, year=2026)


def test_process_without_active_employees_fails(world):
    with pytest.raises(ValidationError):
        world.container.payroll_service.process(actor=ADMIN, month=5, year=2026)


def test_process_rejects_non_positive_working_days():
    world = build_world(config={WORKING_DAYS_PER_MONTH: "0"})
    world.add_employee()

    with pytest.raises(ValidationError):
        world.container.payroll_service.process(actor=ADMIN, month=5, year=2026)
    assert world.payrolls_repo.rows == {}


def test_employee_cannot_process(world):
    emp = world.add_employee()
    with pytest.raises(AuthorizationError):
        world.container.payroll_service.process(actor=employee_actor(emp), month=5, year=2026)


def test_approve_then_lock_makes_payroll_immutable(world):
    world.add_employee()
    svc = world.container.payroll_service
    (p,) = svc.process(actor=ADMIN, month=5, year=2026)

    with pytest.raises(InvalidStateError):
        svc.lock(actor=ADMIN, payroll_id=p.id)

    approved = svc.approve(actor=EMPLOYER, payroll_id=p.id)
    assert approved.status == PayrollStatus.APPROVED
    assert approved.approved_by == EMPLOYER.user_id
    assert svc.approve(actor=EMPLOYER, payroll_id=p.id).status == PayrollStatus.APPROVED

    locked = svc.lock(actor=ADMIN, payroll_id=p.id)
    assert locked.status == PayrollStatus.LOCKED

    with pytest.raises(InvalidStateError):
        svc.update(actor=ADMIN, payroll_id=p.id, base_salary="9000")
    with pytest.raises(InvalidStateError):
        svc.delete(actor=ADMIN, payroll_id=p.id)
    with pytest.raises(InvalidStateError):
        svc.approve(actor=ADMIN, payroll_id=p.id)
    assert world.payrolls_repo.get_by_id(p.id).base_salary == Decimal("5000.00")


def test_update_recomputes_from_stored_attendance(world):
    emp = world.add_employee()
    _absent(world, emp, date(2026, 5, 4), date(2026, 5, 5))
    svc = world.container.payroll_service
    (p,) = svc.process(actor=ADMIN, month=5, year=2026)

    # Later attendance edits must not leak into the stored snapshot.
    _absent(world, emp, date(2026, 5, 6))
    updated = svc.update(actor=ADMIN, payroll_id=p.id, travelling_allowance="660", remarks="Raise")

    assert updated.absence_days == 2
    assert updated.travelling_deduction == Decimal("60.00")
    assert updated.gross_salary == Decimal("5760.00")
    assert updated.net_salary == Decimal("5700.00")
    assert updated.remarks == "Raise"
    assert updated.base_salary == Decimal("5000.00")


def test_update_rejects_negative_amounts(world):
    world.add_employee()
    svc = world.container.payroll_service
    (p,) = svc.process(actor=ADMIN, month=5, year=2026)

    with pytest.raises(ValidationError):
        svc.update(actor=ADMIN, payroll_id=p.id, base_salary="-1")


def test_delete_draft(world):
    world.add_employee()
    svc = world.container.payroll_service
    (p,) = svc.process(actor=ADMIN, month=5, year=2026)

    svc.delete(actor=ADMIN, payroll_id=p.id)

    assert world.payrolls_repo.rows == {}
    assert "DELETE_PAYROLL" in world.audit_repo.actions


def test_employees_only_see_their_own_payroll(world):
    a = world.add_employee()
    b = world.add_employee()
    svc = world.container.payroll_service
    rows = svc.process(actor=ADMIN, month=5, year=2026)
    b_row = next(p for p in rows if p.employee_id == b.id)

    mine = svc.list_payrolls(actor=employee_actor(a), criteria=PayrollFilter(month=5, year=2026))
    assert [p.employee_id for p in mine] == [a.id]
    with pytest.raises(AuthorizationError):
        svc.get_payroll(actor=employee_actor(a), payroll_id=b_row.id)
