from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import month_range
from ..common.http import arg_date, arg_int, body_date, current_actor, json_body, ok
from ..common.validators import require_month
from ..container import Container
from ..core.exceptions import ValidationError
from .model import AttendanceFilter


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="list_attendance")
    def list_attendance():
        start, end = arg_date("start_date"), arg_date("end_date")
        month, year = arg_int("month"), arg_int("year")
        if month is not None and year is not None:
            start, end = month_range(*require_month(month, year))
        criteria = AttendanceFilter(employee_id=arg_int("employee_id"), start_date=start, end_date=end)
        return ok(service.list_attendance(actor=current_actor(), criteria=criteria))

    @app.route("/api/attendance/absence", methods=["POST"], endpoint="mark_absence")
    def mark_absence():
        data = json_body()
        if data.get("employee_id") is None:
            raise ValidationError("employee_id is required")
        record = service.mark_absence(
            actor=current_actor(),
            employee_id=int(data["employee_id"]),
            work_date=body_date(data, "date"),
            remarks=data.get("remarks"),
        )
        return ok(record, 201)

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="update_attendance")
    def update_attendance(attendance_id: int):
        data = json_body()
        record = service.update_attendance(
            actor=current_actor(),
            attendance_id=attendance_id,
            is_present=data.get("is_present"),
            is_absence=data.get("is_absence"),
            remarks=data.get("remarks"),
        )
        return ok(record)

    @app.route("/api/attendance/summary/<int:employee_id>", methods=["GET"], endpoint="attendance_summary")
    def attendance_summary(employee_id: int):
        summary = service.monthly_summary(
            actor=current_actor(),
            employee_id=employee_id,
            month=request.args.get("month"),
            year=request.args.get("year"),
        )
        return ok(summary)
