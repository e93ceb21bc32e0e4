from __future__ import annotations

from flask import Flask, request

from ..common.http import arg_date, arg_enum, body_date, current_actor, json_body, ok
from ..container import Container
from ..core.enums import EmployeeStatus
from .model import EmployeeFilter

_REQUIRED_FIELDS = ("employee_code", "first_name", "last_name", "email", "department", "job_title", "base_salary")
_OPTIONAL_FIELDS = (
    "travelling_allowance",
    "other_allowances",
    "local_leave_balance",
    "sick_leave_balance",
    "user_id",
)


def register(app: Flask, container: Container) -> None:
    service = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    def list_employees():
        criteria = EmployeeFilter(
            status=arg_enum("status", EmployeeStatus),
            department=request.args.get("department") or None,
            search=request.args.get("search") or None,
        )
        return ok(service.list_employees(actor=current_actor(), criteria=criteria))

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    def create_employee():
        data = json_body()
        fields = {name: data.get(name) for name in _REQUIRED_FIELDS}
        fields.update({name: data[name] for name in _OPTIONAL_FIELDS if data.get(name) is not None})
        employee = service.create_employee(
            actor=current_actor(),
            joining_date=body_date(data, "joining_date"),
            use_proration=bool(data.get("use_proration", True)),
            **fields,
        )
        return ok(employee, 201)

    @app.route("/api/employees/stats", methods=["GET"], endpoint="employee_stats")
    def employee_stats():
        return ok(service.employee_stats(actor=current_actor(), today=arg_date("date")))

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    def get_employee(employee_id: int):
        return ok(service.get_employee(actor=current_actor(), employee_id=employee_id))

    @app.route("/api/employees/<int:employee_id>", methods=["PUT", "PATCH"], endpoint="update_employee")
    def update_employee(employee_id: int):
        data = json_body()
        if data.get("joining_date"):
            data["joining_date"] = body_date(data, "joining_date")
        return ok(service.update_employee(actor=current_actor(), employee_id=employee_id, changes=data))

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="deactivate_employee")
    def deactivate_employee(employee_id: int):
        return ok(service.deactivate_employee(actor=current_actor(), employee_id=employee_id))
