from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_id, as_iso, db_cursor, fetchall, fetchone, read_or_default
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        date=as_iso(r["date"]),
        class_id=as_id(r["class_id"]),
        student_id=as_id(r["student_id"]),
        status=AttendanceStatus(r["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select(self, where: str = "", params: tuple = ()) -> list[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT date, class_id, student_id, status
                FROM attendance
                {where}
                ORDER BY date ASC, id ASC
                """,
                params,
            )
            return [_to_record(r) for r in fetchall(cur)]

    @read_or_default(lambda: None)
    def get_for_student_and_date(self, student_id: str, date: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT date, class_id, student_id, status
                FROM attendance
                WHERE student_id=%s AND date=%s
                """,
                (student_id, date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert(self, record: AttendanceRecord) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(date, class_id, student_id, status)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), class_id=VALUES(class_id)
                """,
                (record.date, record.class_id, record.student_id, record.status.value),
            )

    def bulk_insert(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0

        # Existing (date, student_id) rows are kept; unknown students still fail the foreign key.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance(date, class_id, student_id, status)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE id=id
                """,
                [(r.date, r.class_id, r.student_id, r.status.value) for r in records],
            )
            return int(cur.rowcount or 0)

    @read_or_default(list)
    def list_by_date(self, date: str) -> Sequence[AttendanceRecord]:
        return self._select("WHERE date=%s", (date,))

    @read_or_default(list)
    def list_by_date_and_class(self, date: str, class_id: str) -> Sequence[AttendanceRecord]:
        return self._select("WHERE date=%s AND class_id=%s", (date, class_id))

    @read_or_default(list)
    def list_for_class_in_range(self, class_id: str, start: str, end: str) -> Sequence[AttendanceRecord]:
        return self._select("WHERE class_id=%s AND date BETWEEN %s AND %s", (class_id, start, end))

    def delete_by_date(self, date: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE date=%s", (date,))
            return int(cur.rowcount or 0)

    @read_or_default(list)
    def list_dates(self, class_id: Optional[str] = None) -> Sequence[str]:
        where = ""
        params: tuple = ()
        if class_id is not None:
            where = "WHERE class_id=%s"
            params = (class_id,)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT DISTINCT date FROM attendance {where} ORDER BY date DESC", params)
            return [as_iso(r["date"]) for r in fetchall(cur)]

    @read_or_default(list)
    def get_report_rows(
        self,
        *,
        start: Optional[str] = None,
        end: Optional[str] = None,
        class_id: Optional[str] = None,
        division: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses: list[str] = []
        params: list[object] = []

        if start:
            clauses.append("a.date >= %s")
            params.append(start)
        if end:
            clauses.append("a.date <= %s")
            params.append(end)
        if class_id:
            clauses.append("a.class_id=%s")
            params.append(class_id)
        if division:
            clauses.append("s.division=%s")
            params.append(division)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    a.date, a.status,
                    c.name AS class_name,
                    s.name AS student_name, s.tr_no, s.its_no, s.division, s.subject
                FROM attendance a
                JOIN classes c ON c.id = a.class_id
                JOIN students s ON s.id = a.student_id
                {where}
                ORDER BY a.date ASC, c.name ASC, s.tr_no ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    date=as_iso(r["date"]),
                    class_name=r["class_name"],
                    student_name=r["student_name"],
                    tr_no=r["tr_no"],
                    its_no=r["its_no"],
                    status=AttendanceStatus(r["status"]),
                    division=r.get("division"),
                    subject=r.get("subject"),
                )
                for r in fetchall(cur)
            ]
