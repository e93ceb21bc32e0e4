from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Holiday
from .repository import HolidayRepository


def _to_holiday(r: Dict[str, Any]) -> Holiday:
    return Holiday(id=int(r["id"]), name=r["name"], holiday_date=r["date"], description=r.get("description"))


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, date, description FROM public_holidays WHERE id=%s", (int(holiday_id),))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def get_by_date(self, holiday_date: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, date, description FROM public_holidays WHERE date=%s", (holiday_date,))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def create(self, *, name: str, holiday_date: date, description: Optional[str] = None) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO public_holidays(name, date, description) VALUES(%s,%s,%s)",
                (name, holiday_date, description),
            )
            return int(cur.lastrowid)

    def list_between(self, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[Holiday]:
        clauses: list[str] = []
        params: list[object] = []
        if start is not None:
            clauses.append("date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT id, name, date, description FROM public_holidays {where_clause(clauses)} ORDER BY date",
                tuple(params),
            )
            return [_to_holiday(r) for r in fetchall(cur)]

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM public_holidays WHERE id=%s", (int(holiday_id),))
            return cur.rowcount > 0

    def update(self, holiday: Holiday) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE public_holidays SET name=%s, date=%s, description=%s WHERE id=%s",
                (holiday.name, holiday.holiday_date, holiday.description, int(holiday.id)),
            )
            return cur.rowcount > 0

    def list_upcoming(self, from_date: date, limit: int) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, name, date, description FROM public_holidays WHERE date >= %s ORDER BY date LIMIT %s",
                (from_date, int(limit)),
            )
            return [_to_holiday(r) for r in fetchall(cur)]
