from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ConfigEntry
from .repository import SystemConfigRepository


class MySQLSystemConfigRepository(SystemConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, key: str) -> Optional[ConfigEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT config_key, config_value, description FROM system_config WHERE config_key=%s",
                (key,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return ConfigEntry(key=r["config_key"], value=r["config_value"], description=r.get("description"))

    def list_all(self) -> Sequence[ConfigEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT config_key, config_value, description FROM system_config ORDER BY config_key")
            return [
                ConfigEntry(key=r["config_key"], value=r["config_value"], description=r.get("description"))
                for r in fetchall(cur)
            ]

    def upsert(self, entry: ConfigEntry) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO system_config(config_key, config_value, description)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    config_value=VALUES(config_value),
                    description=COALESCE(VALUES(description), description)
                """,
                (entry.key, entry.value, entry.description),
            )
