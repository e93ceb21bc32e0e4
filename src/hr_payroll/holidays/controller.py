from __future__ import annotations

from flask import Flask

from ..common.http import arg_date, arg_int, body_date, current_actor, json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.holiday_service

    @app.route("/api/holidays", methods=["GET"], endpoint="list_holidays")
    def list_holidays():
        current_actor()
        return ok(service.list_holidays(year=arg_int("year"), month=arg_int("month")))

    @app.route("/api/holidays", methods=["POST"], endpoint="create_holiday")
    def create_holiday():
        data = json_body()
        holiday = service.create_holiday(
            actor=current_actor(),
            name=str(data.get("name") or ""),
            holiday_date=body_date(data, "date"),
            description=data.get("description"),
        )
        return ok(holiday, 201)

    @app.route("/api/holidays/working-days", methods=["GET"], endpoint="working_days")
    def working_days():
        current_actor()
        start, end = arg_date("start_date"), arg_date("end_date")
        if start is None or end is None:
            raise ValidationError("start_date and end_date are required")
        return ok({"start_date": start, "end_date": end, "working_days": service.working_days_between(start, end)})

    @app.route("/api/holidays/upcoming", methods=["GET"], endpoint="upcoming_holidays")
    def upcoming_holidays():
        current_actor()
        limit = arg_int("limit")
        return ok(service.upcoming_holidays(limit=5 if limit is None else limit))

    @app.route("/api/holidays/<int:holiday_id>", methods=["GET"], endpoint="get_holiday")
    def get_holiday(holiday_id: int):
        current_actor()
        return ok(service.get_holiday(holiday_id))

    @app.route("/api/holidays/<int:holiday_id>", methods=["PUT"], endpoint="update_holiday")
    def update_holiday(holiday_id: int):
        data = json_body()
        holiday = service.update_holiday(
            actor=current_actor(),
            holiday_id=holiday_id,
            name=data.get("name"),
            holiday_date=body_date(data, "date") if data.get("date") else None,
            description=data.get("description"),
        )
        return ok(holiday)

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="delete_holiday")
    def delete_holiday(holiday_id: int):
        service.delete_holiday(actor=current_actor(), holiday_id=holiday_id)
        return ok({"message": "Holiday deleted"})
