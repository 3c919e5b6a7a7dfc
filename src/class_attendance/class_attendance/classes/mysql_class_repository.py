from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, read_or_default
from .model import SchoolClass
from .repository import ClassRepository


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @read_or_default(list)
    def list_all(self) -> Sequence[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM classes ORDER BY id")
            return [SchoolClass(class_id=str(r["id"]), name=r["name"]) for r in fetchall(cur)]

    @read_or_default(lambda: None)
    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name FROM classes WHERE id=%s", (class_id,))
            r = fetchone(cur)
            if not r:
                return None
            return SchoolClass(class_id=str(r["id"]), name=r["name"])

    def create(self, *, name: str) -> SchoolClass:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO classes(name) VALUES(%s)", (name,))
            return SchoolClass(class_id=str(cur.lastrowid), name=name)

    def update(self, *, class_id: str, name: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE classes SET name=%s WHERE id=%s", (name, class_id))
            return cur.rowcount > 0

    def delete(self, class_id: str) -> bool:
        # students and attendance go with it through ON DELETE CASCADE
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM classes WHERE id=%s", (class_id,))
            return cur.rowcount > 0
