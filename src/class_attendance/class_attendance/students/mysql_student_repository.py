from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_id, db_cursor, fetchall, fetchone, read_or_default
from .model import Student
from .repository import StudentRepository

_COLUMNS = "id, tr_no, name, its_no, class_id, division, subject, photo"


def _to_student(r: dict) -> Student:
    return Student(
        student_id=str(r["id"]),
        tr_no=r["tr_no"],
        name=r["name"],
        its_no=r["its_no"],
        class_id=as_id(r["class_id"]),
        division=r.get("division"),
        subject=r.get("subject"),
        photo=r.get("photo"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str = "", params: tuple = ()) -> list[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students {where} ORDER BY id", params)
            return [_to_student(r) for r in fetchall(cur)]

    def _select_one(self, where: str, params: tuple) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students {where} LIMIT 1", params)
            r = fetchone(cur)
            return _to_student(r) if r else None

    @read_or_default(list)
    def list_all(self) -> Sequence[Student]:
        return self._select()

    @read_or_default(list)
    def list_by_class(self, class_id: str) -> Sequence[Student]:
        return self._select("WHERE class_id=%s", (class_id,))

    @read_or_default(list)
    def list_by_class_and_division(self, class_id: str, division: str) -> Sequence[Student]:
        return self._select("WHERE class_id=%s AND division=%s", (class_id, division))

    @read_or_default(lambda: None)
    def get_by_id(self, student_id: str) -> Optional[Student]:
        return self._select_one("WHERE id=%s", (student_id,))

    # The uniqueness lookups run ahead of writes, so their errors propagate.
    def find_by_tr_no(self, tr_no: str, *, exclude_id: Optional[str] = None) -> Optional[Student]:
        if exclude_id is None:
            return self._select_one("WHERE tr_no=%s", (tr_no,))
        return self._select_one("WHERE tr_no=%s AND id<>%s", (tr_no, exclude_id))

    def find_by_its_no(self, its_no: str, *, exclude_id: Optional[str] = None) -> Optional[Student]:
        if exclude_id is None:
            return self._select_one("WHERE its_no=%s", (its_no,))
        return self._select_one("WHERE its_no=%s AND id<>%s", (its_no, exclude_id))

    def create(
        self,
        *,
        tr_no: str,
        name: str,
        its_no: str,
        class_id: str,
        division: Optional[str] = None,
        subject: Optional[str] = None,
        photo: Optional[str] = None,
    ) -> Student:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(tr_no, name, its_no, class_id, division, subject, photo)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (tr_no, name, its_no, class_id, division, subject, photo),
            )
            return Student(
                student_id=str(cur.lastrowid),
                tr_no=tr_no,
                name=name,
                its_no=its_no,
                class_id=str(class_id),
                division=division,
                subject=subject,
                photo=photo,
            )

    def update(self, student: Student) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET tr_no=%s, name=%s, its_no=%s, class_id=%s, division=%s, subject=%s, photo=%s
                WHERE id=%s
                """,
                (
                    student.tr_no,
                    student.name,
                    student.its_no,
                    student.class_id,
                    student.division,
                    student.subject,
                    student.photo,
                    student.student_id,
                ),
            )
            return cur.rowcount > 0

    def delete(self, student_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (student_id,))
            return cur.rowcount > 0

    @read_or_default(list)
    def list_divisions(self, class_id: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT DISTINCT division
                FROM students
                WHERE class_id=%s AND division IS NOT NULL AND division<>''
                ORDER BY division
                """,
                (class_id,),
            )
            return [r["division"] for r in fetchall(cur)]
