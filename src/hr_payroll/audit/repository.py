from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AuditEntry


class AuditRepository(Protocol):
    def create(self, *, user_id: int, action: str, entity: str, entity_id: str, changes: Optional[str]) -> int:
        raise NotImplementedError

    def list_for_entity(self, *, entity: str, entity_id: str) -> Sequence[AuditEntry]:
        raise NotImplementedError
