from __future__ import annotations

from flask import Flask

from ..common.http import current_actor, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/audit/<entity>/<entity_id>", methods=["GET"], endpoint="audit_history")
    def audit_history(entity: str, entity_id: str):
        current_actor().require_manager()
        return ok(container.audit_service.history(entity=entity.upper(), entity_id=entity_id))
