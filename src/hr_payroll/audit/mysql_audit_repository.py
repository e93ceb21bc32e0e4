from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: int, action: str, entity: str, entity_id: str, changes: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(user_id, action, entity, entity_id, changes)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(user_id), action, entity, str(entity_id), changes),
            )
            return int(cur.lastrowid)

    def list_for_entity(self, *, entity: str, entity_id: str) -> Sequence[AuditEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, user_id, action, entity, entity_id, changes, created_at
                FROM audit_logs
                WHERE entity=%s AND entity_id=%s
                ORDER BY created_at DESC, id DESC
                """,
                (entity, str(entity_id)),
            )
            return [
                AuditEntry(
                    id=int(r["id"]),
                    user_id=int(r["user_id"]),
                    action=r["action"],
                    entity=r["entity"],
                    entity_id=r["entity_id"],
                    changes=r.get("changes"),
                    created_at=r.get("created_at"),
                )
                for r in fetchall(cur)
            ]
