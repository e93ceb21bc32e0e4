from __future__ import annotations

import os
from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.service import AuditService
from .core.constants import PAYSLIP_COMPANY_FALLBACKS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import EmployeeService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .notifications.notifier import LoggingNotifier, Notifier, SafeNotifier
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.service import PayrollService
from .payslips.mysql_payslip_repository import MySQLPayslipRepository
from .payslips.service import PayslipService
from .reports.service import ReportService
from .system_config.mysql_system_config_repository import MySQLSystemConfigRepository
from .system_config.service import SystemConfigService


@dataclass(frozen=True)
class Container:
    """Everything a controller may reach. Tests build one from in-memory fakes."""

    employee_service: EmployeeService
    leave_service: LeaveService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    payslip_service: PayslipService
    report_service: ReportService
    config_service: SystemConfigService
    holiday_service: HolidayService
    audit_service: AuditService


def build_container(*, db_config: dict, notifier: Notifier | None = None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    employees_repo = MySQLEmployeeRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    payrolls_repo = MySQLPayrollRepository(conn)
    configs_repo = MySQLSystemConfigRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    audit_repo = MySQLAuditRepository(conn)
    payslips_repo = MySQLPayslipRepository(conn)

    audit_service = AuditService(audit_repo)
    config_service = SystemConfigService(configs_repo, conn, audit_service)
    attendance_service = AttendanceService(attendance_repo, employees_repo)
    leave_service = LeaveService(
        leaves_repo,
        employees_repo,
        attendance_service,
        conn,
        SafeNotifier(notifier or LoggingNotifier()),
        audit_service,
    )
    employee_service = EmployeeService(employees_repo, leaves_repo, config_service, conn, audit_service)
    payroll_service = PayrollService(
        payrolls_repo,
        employees_repo,
        attendance_service,
        config_service,
        conn,
        audit_service,
    )
    payslip_service = PayslipService(
        payslips_repo,
        payrolls_repo,
        employees_repo,
        config_service,
        company_defaults={key: os.getenv(key) or value for key, value in PAYSLIP_COMPANY_FALLBACKS.items()},
    )
    report_service = ReportService(employees_repo, leaves_repo, attendance_service, payrolls_repo)
    holiday_service = HolidayService(holidays_repo, conn, audit_service)

    return Container(
        employee_service=employee_service,
        leave_service=leave_service,
        attendance_service=attendance_service,
        payroll_service=payroll_service,
        payslip_service=payslip_service,
        report_service=report_service,
        config_service=config_service,
        holiday_service=holiday_service,
        audit_service=audit_service,
    )
