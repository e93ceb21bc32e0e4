from __future__ import annotations

from flask import Flask, request

from ..common.http import arg_date, arg_enum, arg_int, current_actor, ok
from ..container import Container
from ..core.enums import LeaveStatus, LeaveType, PayrollStatus
from ..core.exceptions import ValidationError
from ..leaves.model import LeaveFilter
from ..payroll.model import PayrollFilter


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/api/reports/leaves", methods=["GET"], endpoint="leave_report")
    def leave_report():
        criteria = LeaveFilter(
            employee_id=arg_int("employee_id"),
            status=arg_enum("status", LeaveStatus),
            leave_type=arg_enum("leave_type", LeaveType),
            start_from=arg_date("start_date"),
            end_to=arg_date("end_date"),
        )
        return ok(service.leave_report(actor=current_actor(), criteria=criteria))

    @app.route("/api/reports/attendance", methods=["GET"], endpoint="attendance_report")
    def attendance_report():
        month, year = arg_int("month"), arg_int("year")
        if month is None or year is None:
            raise ValidationError("Month and year are required")
        report = service.attendance_report(
            actor=current_actor(),
            month=month,
            year=year,
            department=request.args.get("department") or None,
            employee_id=arg_int("employee_id"),
        )
        return ok(report)

    @app.route("/api/reports/payroll", methods=["GET"], endpoint="payroll_report")
    def payroll_report():
        criteria = PayrollFilter(
            employee_id=arg_int("employee_id"),
            month=arg_int("month"),
            year=arg_int("year"),
            status=arg_enum("status", PayrollStatus),
        )
        return ok(service.payroll_report(actor=current_actor(), criteria=criteria))

    @app.route("/api/reports/dashboard", methods=["GET"], endpoint="dashboard")
    def dashboard():
        return ok(service.dashboard(actor=current_actor(), today=arg_date("date")))
