from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AuditEntry:
    id: int
    user_id: int
    action: str
    entity: str
    entity_id: str
    changes: Optional[str]
    created_at: Optional[datetime] = None
