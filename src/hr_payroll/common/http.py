from __future__ import annotations

import dataclasses
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from flask import jsonify, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .datetime_utils import parse_iso_date
from .identity import Actor


def current_actor() -> Actor:
    """Build the caller from the headers set by the upstream auth layer."""
    user_id = request.headers.get("X-User-Id")
    role = request.headers.get("X-User-Role")
    if not user_id or not role:
        raise AuthenticationError("Authentication required")
    try:
        employee_id = request.headers.get("X-Employee-Id")
        return Actor(
            user_id=int(user_id),
            role=Role(role.upper()),
            employee_id=int(employee_id) if employee_id else None,
        )
    except ValueError:
        raise AuthenticationError("Invalid identity headers")


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("JSON object body is required")
    return data


def arg_int(name: str) -> Optional[int]:
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def _date(value: str, name: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be a date in YYYY-MM-DD format")


def arg_date(name: str) -> Optional[date]:
    value = request.args.get(name)
    return _date(value, name) if value else None


def body_date(data: dict, name: str) -> date:
    value = data.get(name)
    if not value:
        raise ValidationError(f"{name} is required")
    return _date(str(value), name)


def to_plain(value: Any) -> Any:
    """Convert dataclasses, enums, dates and decimals into JSON-friendly values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value


def ok(value: Any, status: int = 200):
    return jsonify(to_plain(value)), status


def arg_enum(name: str, enum_cls: type[Enum]):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return enum_cls(value.upper())
    except ValueError:
        raise ValidationError(f"Invalid {name}: {value}")
