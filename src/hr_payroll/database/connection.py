from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """Singleton-like DB connection factory.

    Outside a transaction every repository call opens a short-lived connection.
    Inside ``transaction()`` the bound connection is reused by every repository
    call made from the same context, so all of their writes commit or roll back
    together.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config
        self._active: ContextVar[Optional[Any]] = ContextVar(f"hr_payroll_tx_{id(self)}", default=None)

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            # rowcount reports matched rows, so idempotent UPDATEs still count as found.
            client_flags=[ClientFlag.FOUND_ROWS],
        )

    def active_connection(self):
        return self._active.get()

    @contextmanager
    def transaction(self, *, isolation_level: str = "READ COMMITTED") -> Iterator[None]:
        if self._active.get() is not None:
            # Nested scopes join the outer transaction.
            yield
            return

        conn = self.connect()
        token = self._active.set(conn)
        try:
            conn.start_transaction(isolation_level=isolation_level)
            yield
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._active.reset(token)
            conn.close()
