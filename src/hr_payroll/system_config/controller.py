from __future__ import annotations

from flask import Flask

from ..common.http import current_actor, json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .model import ConfigEntry


def register(app: Flask, container: Container) -> None:
    service = container.config_service

    @app.route("/api/config", methods=["GET"], endpoint="get_all_config")
    def get_all_config():
        current_actor()
        return ok(service.get_all())

    @app.route("/api/config", methods=["PUT"], endpoint="update_many_config")
    def update_many_config():
        data = json_body()
        items = data.get("configs")
        if not isinstance(items, list):
            raise ValidationError("configs must be a list")
        entries = [
            ConfigEntry(key=str(item.get("key") or ""), value=str(item.get("value", "")), description=item.get("description"))
            for item in items
            if isinstance(item, dict)
        ]
        return ok(service.upsert_many(actor=current_actor(), entries=entries))

    @app.route("/api/config/<key>", methods=["GET"], endpoint="get_config")
    def get_config(key: str):
        current_actor()
        return ok(service.get(key))

    @app.route("/api/config/<key>", methods=["PUT"], endpoint="update_config")
    def update_config(key: str):
        data = json_body()
        if "value" not in data:
            raise ValidationError("value is required")
        entry = service.upsert(actor=current_actor(), key=key, value=str(data["value"]), description=data.get("description"))
        return ok(entry)
