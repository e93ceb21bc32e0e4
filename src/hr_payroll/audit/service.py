from __future__ import annotations

import dataclasses
import json
from enum import Enum
from typing import Any, Optional, Sequence

from ..common.identity import Actor
from .model import AuditEntry
from .repository import AuditRepository


def _default(value: Any) -> Any:
    if dataclasses.is_dataclass(value):
        return dataclasses.asdict(value)
    if isinstance(value, Enum):
        return value.value
    return str(value)


class AuditService:
    """Append-only change log. Call it inside the transaction of the change it describes."""

    def __init__(self, audit: AuditRepository):
        self._audit = audit

    def record(self, *, actor: Actor, action: str, entity: str, entity_id: Any, changes: Optional[dict] = None) -> int:
        payload = json.dumps(changes, default=_default) if changes is not None else None
        return self._audit.create(
            user_id=actor.user_id,
            action=action,
            entity=entity,
            entity_id=str(entity_id),
            changes=payload,
        )

    def history(self, *, entity: str, entity_id: Any) -> Sequence[AuditEntry]:
        return self._audit.list_for_entity(entity=entity, entity_id=str(entity_id))
