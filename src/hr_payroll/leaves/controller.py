from __future__ import annotations

from flask import Flask, request

from ..common.http import arg_date, arg_enum, arg_int, body_date, current_actor, json_body, ok
from ..container import Container
from ..core.enums import HalfDayPeriod, LeaveStatus, LeaveType
from ..core.exceptions import ValidationError
from .model import LeaveApplication, LeaveFilter


def _application(data: dict) -> LeaveApplication:
    try:
        leave_type = LeaveType(str(data.get("leave_type", "")).upper())
        period = data.get("half_day_period")
        half_day_period = HalfDayPeriod(str(period).upper()) if period else None
    except ValueError:
        raise ValidationError("Invalid leave type or half-day period")
    return LeaveApplication(
        leave_type=leave_type,
        start_date=body_date(data, "start_date"),
        end_date=body_date(data, "end_date"),
        reason=str(data.get("reason") or ""),
        is_half_day=bool(data.get("is_half_day", False)),
        half_day_period=half_day_period,
    )


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    def list_leaves():
        criteria = LeaveFilter(
            employee_id=arg_int("employee_id"),
            status=arg_enum("status", LeaveStatus),
            leave_type=arg_enum("leave_type", LeaveType),
            start_from=arg_date("start_date"),
            end_to=arg_date("end_date"),
        )
        return ok(service.list_leaves(actor=current_actor(), criteria=criteria))

    @app.route("/api/leaves", methods=["POST"], endpoint="apply_leave")
    def apply_leave():
        leave = service.apply(actor=current_actor(), application=_application(json_body()))
        return ok(leave, 201)

    @app.route("/api/leaves/urgent", methods=["POST"], endpoint="add_urgent_leave")
    def add_urgent_leave():
        data = json_body()
        employee_id = data.get("employee_id")
        if employee_id is None:
            raise ValidationError("employee_id is required")
        leave = service.add_urgent_leave(
            actor=current_actor(),
            employee_id=int(employee_id),
            application=_application(data),
        )
        return ok(leave, 201)

    @app.route("/api/leaves/<int:leave_id>", methods=["GET"], endpoint="get_leave")
    def get_leave(leave_id: int):
        return ok(service.get_leave(actor=current_actor(), leave_id=leave_id))

    @app.route("/api/leaves/<int:leave_id>", methods=["PUT"], endpoint="update_leave")
    def update_leave(leave_id: int):
        return ok(service.update(actor=current_actor(), leave_id=leave_id, application=_application(json_body())))

    @app.route("/api/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="approve_leave")
    def approve_leave(leave_id: int):
        return ok(service.approve(actor=current_actor(), leave_id=leave_id))

    @app.route("/api/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="reject_leave")
    def reject_leave(leave_id: int):
        data = request.get_json(silent=True) or {}
        return ok(service.reject(actor=current_actor(), leave_id=leave_id, reason=str(data.get("reason") or "")))

    @app.route("/api/leaves/<int:leave_id>", methods=["DELETE"], endpoint="cancel_leave")
    def cancel_leave(leave_id: int):
        service.cancel(actor=current_actor(), leave_id=leave_id)
        return ok({"message": "Leave cancelled"})
