"""In-memory repositories shared by the service and controller tests."""

from __future__ import annotations

import copy
import dataclasses
from contextlib import contextmanager
from datetime import date, datetime
from decimal import Decimal

from hr_payroll.attendance.model import AttendanceRecord
from hr_payroll.attendance.service import AttendanceService
from hr_payroll.audit.model import AuditEntry
from hr_payroll.audit.service import AuditService
from hr_payroll.common.identity import Actor
from hr_payroll.container import Container
from hr_payroll.core.enums import EmployeeStatus, LeaveStatus, LeaveType, PayrollStatus, Role
from hr_payroll.employees.model import Employee, NewEmployee
from hr_payroll.employees.service import EmployeeService
from hr_payroll.holidays.model import Holiday
from hr_payroll.holidays.service import HolidayService
from hr_payroll.leaves.model import Leave
from hr_payroll.leaves.service import LeaveService
from hr_payroll.notifications.notifier import SafeNotifier
from hr_payroll.payroll.model import Payroll
from hr_payroll.payroll.service import PayrollService
from hr_payroll.payslips.model import Payslip, PayslipSummary
from hr_payroll.payslips.service import PayslipService
from hr_payroll.reports.service import ReportService
from hr_payroll.system_config.model import ConfigEntry
from hr_payroll.system_config.service import SystemConfigService

_BALANCE_FIELD = {
    LeaveType.LOCAL: "local_leave_balance",
    LeaveType.SICK: "sick_leave_balance",
}


class FakeEmployeesRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Employee] = {}

    def get_by_id(self, employee_id):
        return self.rows.get(int(employee_id))

    def get_by_code(self, employee_code):
        return next((e for e in self.rows.values() if e.employee_code == employee_code), None)

    def get_by_email(self, email):
        return next((e for e in self.rows.values() if e.email == email), None)

    def get_by_user_id(self, user_id):
        return next((e for e in self.rows.values() if e.user_id == user_id), None)

    def create(self, new):
        eid = self._next_id
        self._next_id += 1
        self.rows[eid] = Employee(id=eid, status=EmployeeStatus.ACTIVE, **dataclasses.asdict(new))
        return eid

    def save(self, employee):
        if employee.id not in self.rows:
            return False
        self.rows[employee.id] = employee
        return True

    def set_status(self, employee_id, status):
        employee = self.rows.get(int(employee_id))
        if not employee:
            return False
        self.rows[employee.id] = dataclasses.replace(employee, status=status)
        return True

    def list(self, criteria):
        out = list(self.rows.values())
        if criteria.status is not None:
            out = [e for e in out if e.status == criteria.status]
        if criteria.department:
            out = [e for e in out if e.department == criteria.department]
        if criteria.search:
            needle = criteria.search.lower()
            out = [e for e in out if needle in f"{e.first_name} {e.last_name} {e.email} {e.employee_code}".lower()]
        return out

    def debit_balance(self, employee_id, leave_type, days):
        employee = self.rows.get(int(employee_id))
        field = _BALANCE_FIELD[leave_type]
        if not employee or getattr(employee, field) < days:
            return False
        self.rows[employee.id] = dataclasses.replace(employee, **{field: getattr(employee, field) - days})
        return True

    def credit_balance(self, employee_id, leave_type, days):
        employee = self.rows.get(int(employee_id))
        field = _BALANCE_FIELD[leave_type]
        if not employee:
            return False
        self.rows[employee.id] = dataclasses.replace(employee, **{field: getattr(employee, field) + days})
        return True

    def count_by_department(self, status):
        out: dict[str, int] = {}
        for e in self.rows.values():
            if e.status == status:
                out[e.department] = out.get(e.department, 0) + 1
        return out


class FakeLeavesRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Leave] = {}

    def get_by_id(self, leave_id):
        return self.rows.get(int(leave_id))

    def create(self, new):
        lid = self._next_id
        self._next_id += 1
        self.rows[lid] = Leave(id=lid, created_at=datetime(2026, 1, 1, 9, 0), **dataclasses.asdict(new))
        return lid

    def find_active_in_range(self, *, employee_id, start_date, end_date, exclude_id=None):
        return [
            leave
            for leave in self.rows.values()
            if leave.employee_id == employee_id
            and leave.status in {LeaveStatus.PENDING, LeaveStatus.APPROVED}
            and leave.start_date <= end_date
            and leave.end_date >= start_date
            and leave.id != exclude_id
        ]

    def mark_approved(self, *, leave_id, approved_by, approved_at):
        leave = self.rows.get(int(leave_id))
        if not leave or leave.status != LeaveStatus.PENDING:
            return False
        self.rows[leave.id] = dataclasses.replace(
            leave, status=LeaveStatus.APPROVED, approved_by=approved_by, approved_at=approved_at
        )
        return True

    def mark_rejected(self, *, leave_id, rejected_by, rejected_at, reason):
        leave = self.rows.get(int(leave_id))
        if not leave or leave.status != LeaveStatus.PENDING:
            return False
        self.rows[leave.id] = dataclasses.replace(
            leave,
            status=LeaveStatus.REJECTED,
            rejected_by=rejected_by,
            rejected_at=rejected_at,
            rejection_reason=reason,
        )
        return True

    def update_pending(self, leave):
        current = self.rows.get(leave.id)
        if not current or current.status != LeaveStatus.PENDING:
            return False
        self.rows[leave.id] = leave
        return True

    def delete(self, leave_id):
        return self.rows.pop(int(leave_id), None) is not None

    def _matching(self, criteria):
        out = list(self.rows.values())
        if criteria.employee_id is not None:
            out = [r for r in out if r.employee_id == criteria.employee_id]
        if criteria.status is not None:
            out = [r for r in out if r.status == criteria.status]
        if criteria.leave_type is not None:
            out = [r for r in out if r.leave_type == criteria.leave_type]
        if criteria.start_from is not None:
            out = [r for r in out if r.start_date >= criteria.start_from]
        if criteria.end_to is not None:
            out = [r for r in out if r.end_date <= criteria.end_to]
        if criteria.on_date is not None:
            out = [r for r in out if r.start_date <= criteria.on_date <= r.end_date]
        return out

    def list(self, criteria, *, limit=500):
        return sorted(self._matching(criteria), key=lambda r: r.id, reverse=True)[:limit]

    def count(self, criteria):
        return len(self._matching(criteria))


class FakeAttendanceRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, AttendanceRecord] = {}

    def _find(self, employee_id, work_date):
        return next((r for r in self.rows.values() if r.employee_id == employee_id and r.work_date == work_date), None)

    def get_by_id(self, attendance_id):
        return self.rows.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id, work_date):
        return self._find(employee_id, work_date)

    def list(self, criteria):
        out = list(self.rows.values())
        if criteria.employee_id is not None:
            out = [r for r in out if r.employee_id == criteria.employee_id]
        if criteria.start_date is not None:
            out = [r for r in out if r.work_date >= criteria.start_date]
        if criteria.end_date is not None:
            out = [r for r in out if r.work_date <= criteria.end_date]
        return sorted(out, key=lambda r: (r.work_date, r.employee_id), reverse=True)

    def insert_skip_existing(self, records):
        inserted = 0
        for record in records:
            if self._find(record.employee_id, record.work_date):
                continue
            self._insert(record)
            inserted += 1
        return inserted

    def _insert(self, record, attendance_id=None):
        aid = attendance_id or self._next_id
        if attendance_id is None:
            self._next_id += 1
        self.rows[aid] = AttendanceRecord(id=aid, **dataclasses.asdict(record))
        return aid

    def upsert(self, record):
        existing = self._find(record.employee_id, record.work_date)
        return self._insert(record, existing.id if existing else None)

    def update_state(self, *, attendance_id, is_present, is_absence, remarks=None):
        record = self.rows.get(int(attendance_id))
        if not record or record.is_leave:
            return False
        self.rows[record.id] = dataclasses.replace(record, is_present=is_present, is_absence=is_absence, remarks=remarks)
        return True

    def delete_leave_rows(self, *, employee_id, start_date, end_date):
        doomed = [
            r.id
            for r in self.rows.values()
            if r.employee_id == employee_id and start_date <= r.work_date <= end_date and r.is_leave
        ]
        for aid in doomed:
            del self.rows[aid]
        return len(doomed)


class FakePayrollsRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Payroll] = {}

    def get_by_id(self, payroll_id):
        return self.rows.get(int(payroll_id))

    def exists_for_month(self, *, month, year):
        return any(p.month == month and p.year == year for p in self.rows.values())

    def create_many(self, rows):
        for row in rows:
            pid = self._next_id
            self._next_id += 1
            self.rows[pid] = Payroll(
                id=pid,
                employee_id=row.employee_id,
                month=row.month,
                year=row.year,
                working_days=row.working_days,
                present_days=row.present_days,
                leave_days=row.leave_days,
                absence_days=row.absence_days,
                base_salary=row.compensation.base_salary,
                travelling_allowance=row.compensation.travelling_allowance,
                other_allowances=row.compensation.other_allowances,
                travelling_deduction=row.figures.travelling_deduction,
                total_deductions=row.figures.total_deductions,
                gross_salary=row.figures.gross_salary,
                net_salary=row.figures.net_salary,
                status=PayrollStatus.DRAFT,
            )
        return len(rows)

    def list(self, criteria):
        out = list(self.rows.values())
        for name in ("employee_id", "month", "year", "status"):
            value = getattr(criteria, name)
            if value is not None:
                out = [p for p in out if getattr(p, name) == value]
        return out

    def mark_approved(self, *, payroll_id, approved_by, approved_at):
        payroll = self.rows.get(int(payroll_id))
        if not payroll or payroll.is_locked:
            return False
        self.rows[payroll.id] = dataclasses.replace(
            payroll, status=PayrollStatus.APPROVED, approved_by=approved_by, approved_at=approved_at
        )
        return True

    def mark_locked(self, *, payroll_id):
        payroll = self.rows.get(int(payroll_id))
        if not payroll or payroll.status != PayrollStatus.APPROVED:
            return False
        self.rows[payroll.id] = dataclasses.replace(payroll, status=PayrollStatus.LOCKED)
        return True

    def save_amounts(self, payroll):
        current = self.rows.get(payroll.id)
        if not current or current.is_locked:
            return False
        self.rows[payroll.id] = payroll
        return True

    def delete(self, payroll_id):
        payroll = self.rows.get(int(payroll_id))
        if not payroll or payroll.is_locked:
            return False
        del self.rows[payroll.id]
        return True


class FakeConfigRepo:
    def __init__(self, values=None):
        self.rows = {key: ConfigEntry(key=key, value=str(value)) for key, value in (values or {}).items()}

    def get(self, key):
        return self.rows.get(key)

    def list_all(self):
        return sorted(self.rows.values(), key=lambda e: e.key)

    def upsert(self, entry):
        current = self.rows.get(entry.key)
        if entry.description is None and current:
            entry = dataclasses.replace(entry, description=current.description)
        self.rows[entry.key] = entry


class FakeHolidaysRepo:
    def __init__(self):
        self._next_id = 1
        self.rows: dict[int, Holiday] = {}

    def get_by_id(self, holiday_id):
        return self.rows.get(int(holiday_id))

    def get_by_date(self, holiday_date):
        return next((h for h in self.rows.values() if h.holiday_date == holiday_date), None)

    def create(self, *, name, holiday_date, description=None):
        hid = self._next_id
        self._next_id += 1
        self.rows[hid] = Holiday(id=hid, name=name, holiday_date=holiday_date, description=description)
        return hid

    def list_between(self, start=None, end=None):
        return sorted(
            (
                h
                for h in self.rows.values()
                if (start is None or h.holiday_date >= start) and (end is None or h.holiday_date <= end)
            ),
            key=lambda h: h.holiday_date,
        )

    def update(self, holiday):
        if holiday.id not in self.rows:
            return False
        self.rows[holiday.id] = holiday
        return True

    def list_upcoming(self, from_date, limit):
        return self.list_between(start=from_date)[:limit]

    def delete(self, holiday_id):
        return self.rows.pop(int(holiday_id), None) is not None


class FakeAuditRepo:
    def __init__(self):
        self.rows: list[AuditEntry] = []

    def create(self, *, user_id, action, entity, entity_id, changes):
        entry = AuditEntry(
            id=len(self.rows) + 1,
            user_id=user_id,
            action=action,
            entity=entity,
            entity_id=entity_id,
            changes=changes,
        )
        self.rows.append(entry)
        return entry.id

    def list_for_entity(self, *, entity, entity_id):
        return [e for e in reversed(self.rows) if e.entity == entity and e.entity_id == entity_id]

    @property
    def actions(self):
        return [e.action for e in self.rows]


class FakePayslipsRepo:
    def __init__(self, payroll_lookup):
        self._next_id = 1
        self._payroll_lookup = payroll_lookup
        self.rows: dict[int, Payslip] = {}

    def upsert(self, new):
        current = self.rows.get(new.payroll_id)
        sid = current.id if current else self._next_id
        if not current:
            self._next_id += 1
        self.rows[new.payroll_id] = Payslip(id=sid, **dataclasses.asdict(new))
        return sid

    def get_by_payroll_id(self, payroll_id):
        return self.rows.get(int(payroll_id))

    def list_for_employee(self, employee_id):
        out = []
        for payslip in self.rows.values():
            payroll = self._payroll_lookup(payslip.payroll_id)
            if payslip.employee_id == employee_id and payroll:
                out.append(
                    PayslipSummary(
                        payslip=payslip,
                        month=payroll.month,
                        year=payroll.year,
                        net_salary=payroll.net_salary,
                        status=payroll.status,
                    )
                )
        return sorted(out, key=lambda s: (s.year, s.month), reverse=True)


class FakeUnitOfWork:
    """Snapshot the repositories on entry, restore them if the block raises."""

    def __init__(self, *repos):
        self._repos = repos
        self._depth = 0
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self):
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        snapshot = [copy.deepcopy(repo.__dict__) for repo in self._repos]
        self._depth = 1
        try:
            yield
        except Exception:
            for repo, state in zip(self._repos, snapshot):
                repo.__dict__.clear()
                repo.__dict__.update(state)
            self.rollbacks += 1
            raise
        else:
            self.commits += 1
        finally:
            self._depth = 0


class RecordingNotifier:
    def __init__(self):
        self.submitted = []
        self.decided = []

    def leave_submitted(self, leave, employee):
        self.submitted.append(leave.id)

    def leave_decided(self, leave, employee):
        self.decided.append((leave.id, leave.status))


class ExplodingNotifier:
    def leave_submitted(self, leave, employee):
        raise RuntimeError("mail server down")

    def leave_decided(self, leave, employee):
        raise RuntimeError("mail server down")


NOW = datetime(2026, 6, 1, 9, 0)

ADMIN = Actor(user_id=1, role=Role.ADMIN)
EMPLOYER = Actor(user_id=2, role=Role.EMPLOYER)


def employee_actor(employee):
    return Actor(user_id=100 + employee.id, role=Role.EMPLOYEE, employee_id=employee.id)


@dataclasses.dataclass
class World:
    employees_repo: FakeEmployeesRepo
    leaves_repo: FakeLeavesRepo
    attendance_repo: FakeAttendanceRepo
    payrolls_repo: FakePayrollsRepo
    configs_repo: FakeConfigRepo
    holidays_repo: FakeHolidaysRepo
    audit_repo: FakeAuditRepo
    payslips_repo: FakePayslipsRepo
    uow: FakeUnitOfWork
    notifier: object
    container: Container

    def add_employee(self, **overrides) -> Employee:
        n = len(self.employees_repo.rows) + 1
        fields = dict(
            employee_code=f"EMP{n:03d}",
            first_name="Test",
            last_name=f"User{n}",
            email=f"user{n}@example.com",
            department="Engineering",
            job_title="Developer",
            joining_date=date(2020, 1, 1),
            base_salary=Decimal("5000.00"),
            travelling_allowance=Decimal("440.00"),
            other_allowances=Decimal("100.00"),
            local_leave_balance=Decimal("15"),
            sick_leave_balance=Decimal("10"),
        )
        fields.update(overrides)
        eid = self.employees_repo.create(NewEmployee(**fields))
        return self.employees_repo.get_by_id(eid)

    def employee(self, employee_id) -> Employee:
        return self.employees_repo.get_by_id(employee_id)


def build_world(*, notifier=None, config=None, clock=lambda: NOW) -> World:
    employees_repo = FakeEmployeesRepo()
    leaves_repo = FakeLeavesRepo()
    attendance_repo = FakeAttendanceRepo()
    payrolls_repo = FakePayrollsRepo()
    configs_repo = FakeConfigRepo(config)
    holidays_repo = FakeHolidaysRepo()
    audit_repo = FakeAuditRepo()
    payslips_repo = FakePayslipsRepo(lambda payroll_id: payrolls_repo.get_by_id(payroll_id))
    uow = FakeUnitOfWork(
        employees_repo, leaves_repo, attendance_repo, payrolls_repo, configs_repo, holidays_repo, audit_repo, payslips_repo
    )
    notifier = notifier or RecordingNotifier()

    audit_service = AuditService(audit_repo)
    config_service = SystemConfigService(configs_repo, uow, audit_service)
    attendance_service = AttendanceService(attendance_repo, employees_repo)
    leave_service = LeaveService(
        leaves_repo,
        employees_repo,
        attendance_service,
        uow,
        SafeNotifier(notifier),
        audit_service,
        clock=clock,
    )
    container = Container(
        employee_service=EmployeeService(employees_repo, leaves_repo, config_service, uow, audit_service),
        leave_service=leave_service,
        attendance_service=attendance_service,
        payroll_service=PayrollService(
            payrolls_repo, employees_repo, attendance_service, config_service, uow, audit_service, clock=clock
        ),
        payslip_service=PayslipService(payslips_repo, payrolls_repo, employees_repo, config_service, clock=clock),
        report_service=ReportService(employees_repo, leaves_repo, attendance_service, payrolls_repo),
        config_service=config_service,
        holiday_service=HolidayService(holidays_repo, uow, audit_service),
        audit_service=audit_service,
    )
    return World(
        employees_repo=employees_repo,
        leaves_repo=leaves_repo,
        attendance_repo=attendance_repo,
        payrolls_repo=payrolls_repo,
        configs_repo=configs_repo,
        holidays_repo=holidays_repo,
        audit_repo=audit_repo,
        payslips_repo=payslips_repo,
        uow=uow,
        notifier=notifier,
        container=container,
    )
