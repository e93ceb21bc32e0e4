"""Schema and seed helpers used by ``create_app`` and the scripts/ entry points."""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import mysql.connector

from ..core.constants import DEFAULT_SYSTEM_CONFIG

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"
SEED_PATH = Path(__file__).resolve().parent / "seed.sql"

# The SQL files name a database for manual use with the mysql client;
# the configured database always wins here.
_DATABASE_DIRECTIVE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
# A statement ends at a semicolon that closes its line.
_STATEMENT_END = re.compile(r";[ \t]*(?:\r?\n|$)")


@contextmanager
def _server(db_config: dict, *, with_database: bool = True) -> Iterator:
    params = {
        "host": str(db_config.get("host", "localhost")),
        "port": int(db_config.get("port", 3306)),
        "user": str(db_config.get("user", "root")),
        "password": str(db_config.get("password", "")),
        "use_pure": True,
    }
    if with_database:
        params["database"] = str(db_config["database"])
    conn = mysql.connector.connect(**params)
    try:
        yield conn
    finally:
        conn.close()


def split_statements(sql: str) -> list[str]:
    """Split a schema/seed file into executable statements."""
    sql = _DATABASE_DIRECTIVE.sub("", sql)
    lines = [line for line in sql.splitlines() if not line.lstrip().startswith("--")]
    return [stmt.strip() for stmt in _STATEMENT_END.split("\n".join(lines)) if stmt.strip()]


def run_sql_file(db_config: dict, path: str | Path) -> int:
    statements = split_statements(Path(path).read_text(encoding="utf-8"))
    with _server(db_config) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    logger.info("applied %s (%d statements)", Path(path).name, len(statements))
    return len(statements)


def ensure_database_exists(db_config: dict) -> None:
    name = str(db_config["database"])
    with _server(db_config, with_database=False) as conn:
        conn.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)
    run_sql_file(db_config, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SEED_PATH) -> None:
    run_sql_file(db_config, seed_path)


def ensure_default_config(db_config: dict) -> None:
    """Insert the default system_config keys that are missing; existing values are kept."""
    with _server(db_config) as conn:
        cur = conn.cursor()
        cur.executemany(
            "INSERT IGNORE INTO system_config(config_key, config_value, description) VALUES(%s, %s, %s)",
            [(key, value, description) for key, (value, description) in DEFAULT_SYSTEM_CONFIG.items()],
        )
        conn.commit()
    logger.info("default system_config ensured (%d keys)", len(DEFAULT_SYSTEM_CONFIG))


def list_tables(db_config: dict) -> list[str]:
    with _server(db_config) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
