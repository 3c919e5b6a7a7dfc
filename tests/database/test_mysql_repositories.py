from __future__ import annotations

import datetime as dt
import logging

import mysql.connector
import pytest

from src.class_attendance.class_attendance.attendance.model import AttendanceRecord
from src.class_attendance.class_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.class_attendance.class_attendance.classes.mysql_class_repository import MySQLClassRepository
from src.class_attendance.class_attendance.core.enums import AttendanceStatus
from src.class_attendance.class_attendance.core.exceptions import StorageError
from src.class_attendance.class_attendance.students.model import Student
from src.class_attendance.class_attendance.students.mysql_student_repository import MySQLStudentRepository


class FakeCursor:
    def __init__(self, rows=None, *, error=None, rowcount=1, lastrowid=7):
        self.rows = list(rows or [])
        self.error = error
        self.rowcount = rowcount
        self.lastrowid = lastrowid
        self.executed = []
        self.closed = False

    def execute(self, sql, params=()):
        if self.error:
            raise self.error
        self.executed.append((sql, params))

    def executemany(self, sql, seq):
        if self.error:
            raise self.error
        self.executed.append((sql, list(seq)))

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows

    def close(self):
        self.closed = True


class FakeConn:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnFactory:
    def __init__(self, cursor):
        self.conn = FakeConn(cursor)

    def connect(self):
        return self.conn


class UnreachableFactory:
    def connect(self):
        raise mysql.connector.Error(msg="Can't connect to MySQL server")


def test_read_failure_logs_and_returns_empty(caplog):
    repo = MySQLAttendanceRepository(FakeConnFactory(FakeCursor(error=mysql.connector.Error(msg="boom"))))

    with caplog.at_level(logging.ERROR):
        assert repo.list_by_date("2024-01-01") == []
        assert repo.list_dates() == []
        assert repo.get_for_student_and_date("1", "2024-01-01") is None

    assert "list_by_date" in caplog.text


def test_unreachable_server_reads_as_empty_class_list():
    assert MySQLClassRepository(UnreachableFactory()).list_all() == []


def test_write_failure_raises_storage_error_and_rolls_back():
    factory = FakeConnFactory(FakeCursor(error=mysql.connector.Error(msg="Duplicate entry")))
    repo = MySQLClassRepository(factory)

    with pytest.raises(StorageError) as excinfo:
        repo.create(name="Class C")

    assert "Duplicate entry" in str(excinfo.value)
    assert factory.conn.rolled_back
    assert factory.conn.closed


def test_upsert_overwrites_on_duplicate_key():
    cursor = FakeCursor()
    factory = FakeConnFactory(cursor)
    repo = MySQLAttendanceRepository(factory)

    repo.upsert(AttendanceRecord(date="2024-01-01", class_id="1", student_id="2", status=AttendanceStatus.PRESENT))

    sql, params = cursor.executed[0]
    assert "ON DUPLICATE KEY UPDATE" in sql
    assert "class_id=VALUES(class_id)" in sql
    assert params == ("2024-01-01", "1", "2", "present")
    assert factory.conn.committed


def test_create_class_uses_generated_id():
    repo = MySQLClassRepository(FakeConnFactory(FakeCursor(lastrowid=42)))

    created = repo.create(name="Class C")

    assert created.class_id == "42"
    assert created.name == "Class C"


def test_date_columns_come_back_as_iso_strings():
    rows = [{"date": dt.date(2024, 1, 2)}, {"date": dt.date(2024, 1, 1)}]
    repo = MySQLAttendanceRepository(FakeConnFactory(FakeCursor(rows)))

    assert repo.list_dates("1") == ["2024-01-02", "2024-01-01"]


def test_bulk_insert_keeps_existing_rows():
    cursor = FakeCursor(rowcount=1)
    repo = MySQLAttendanceRepository(FakeConnFactory(cursor))
    records = [
        AttendanceRecord(date="2024-01-01", class_id="1", student_id=str(i), status=AttendanceStatus.ABSENT)
        for i in (1, 2)
    ]

    assert repo.bulk_insert(records) == 1
    sql, params = cursor.executed[0]
    assert "IGNORE" not in sql
    assert "ON DUPLICATE KEY UPDATE id=id" in sql
    assert len(params) == 2


def test_bulk_insert_for_unknown_student_raises():
    error = mysql.connector.Error(msg="Cannot add or update a child row: a foreign key constraint fails")
    factory = FakeConnFactory(FakeCursor(error=error))
    repo = MySQLAttendanceRepository(factory)
    record = AttendanceRecord(date="2024-01-01", class_id="1", student_id="999", status=AttendanceStatus.ABSENT)

    with pytest.raises(StorageError, match="foreign key"):
        repo.bulk_insert([record])
    assert factory.conn.rolled_back


def test_bulk_insert_with_nothing_to_write_skips_the_server():
    assert MySQLAttendanceRepository(UnreachableFactory()).bulk_insert([]) == 0


def _student_row(**overrides):
    row = {
        "id": 3,
        "tr_no": "1",
        "name": "Alice",
        "its_no": "ITS-1",
        "class_id": 5,
        "division": "X",
        "subject": None,
        "photo": None,
    }
    row.update(overrides)
    return row


def test_find_by_tr_no_without_exclusion():
    cursor = FakeCursor([_student_row()])
    repo = MySQLStudentRepository(FakeConnFactory(cursor))

    found = repo.find_by_tr_no("1")

    sql, params = cursor.executed[0]
    assert "WHERE tr_no=%s LIMIT 1" in sql
    assert "id<>" not in sql
    assert params == ("1",)
    assert found == Student(
        student_id="3", tr_no="1", name="Alice", its_no="ITS-1", class_id="5", division="X"
    )


def test_uniqueness_lookups_exclude_the_student_being_updated():
    cursor = FakeCursor([])
    repo = MySQLStudentRepository(FakeConnFactory(cursor))

    assert repo.find_by_tr_no("1", exclude_id="3") is None
    assert repo.find_by_its_no("ITS-1", exclude_id="3") is None

    (tr_sql, tr_params), (its_sql, its_params) = cursor.executed
    assert "tr_no=%s AND id<>%s" in tr_sql
    assert tr_params == ("1", "3")
    assert "its_no=%s AND id<>%s" in its_sql
    assert its_params == ("ITS-1", "3")


def test_uniqueness_lookup_failure_is_not_swallowed():
    repo = MySQLStudentRepository(FakeConnFactory(FakeCursor(error=mysql.connector.Error(msg="gone away"))))

    with pytest.raises(StorageError):
        repo.find_by_its_no("ITS-1")
    assert repo.get_by_id("3") is None


def test_list_divisions_skips_blank_values():
    cursor = FakeCursor([{"division": "A"}, {"division": "B"}])
    repo = MySQLStudentRepository(FakeConnFactory(cursor))

    assert repo.list_divisions("5") == ["A", "B"]

    sql, params = cursor.executed[0]
    assert "division IS NOT NULL AND division<>''" in sql
    assert "DISTINCT division" in sql
    assert params == ("5",)


def test_report_rows_filter_by_division_on_student():
    row = {
        "date": dt.date(2024, 1, 1),
        "status": "present",
        "class_name": "Class C",
        "student_name": "Alice",
        "tr_no": "1",
        "its_no": "ITS-1",
        "division": "X",
        "subject": None,
    }
    cursor = FakeCursor([row])
    repo = MySQLAttendanceRepository(FakeConnFactory(cursor))

    rows = repo.get_report_rows(start="2024-01-01", end="2024-01-31", class_id="5", division="X")

    sql, params = cursor.executed[0]
    assert "a.date >= %s AND a.date <= %s AND a.class_id=%s AND s.division=%s" in sql
    assert params == ("2024-01-01", "2024-01-31", "5", "X")
    assert rows[0].date == "2024-01-01"
    assert rows[0].status == AttendanceStatus.PRESENT


def test_report_rows_without_filters_have_no_where_clause():
    cursor = FakeCursor([])
    repo = MySQLAttendanceRepository(FakeConnFactory(cursor))

    assert repo.get_report_rows() == []

    sql, params = cursor.executed[0]
    assert "WHERE" not in sql
    assert params == ()
