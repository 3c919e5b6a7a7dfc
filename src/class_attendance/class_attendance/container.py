from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .attendance.json_attendance_repository import JsonAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.sheet import AttendanceSheet
from .classes.json_class_repository import JsonClassRepository
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .core.constants import DEFAULT_MAX_CLASSES
from .core.enums import StorageBackend
from .core.exceptions import ValidationError
from .database.connection import DatabaseConnection, DBConfig
from .database.json_store import JsonFileStore
from .reports.service import ReportService
from .students.json_student_repository import JsonStudentRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService


@dataclass(frozen=True)
class Container:
    backend: StorageBackend

    classes_repo: ClassRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository

    class_service: ClassService
    student_service: StudentService
    attendance_service: AttendanceService
    report_service: ReportService

    def open_sheet(self, *, class_id: str, date: str, division: Optional[str] = None) -> AttendanceSheet:
        sheet = AttendanceSheet(self.attendance_service, self.students_repo, class_id=class_id, division=division)
        sheet.select_date(date)
        return sheet


def _wire(
    backend: StorageBackend,
    classes_repo: ClassRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    *,
    max_classes: int,
) -> Container:
    return Container(
        backend=backend,
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        class_service=ClassService(classes_repo, max_classes=max_classes),
        student_service=StudentService(students_repo, classes_repo),
        attendance_service=AttendanceService(attendance_repo, students_repo),
        report_service=ReportService(attendance_repo, students_repo),
    )


def build_json_container(path: str | Path, *, max_classes: int = DEFAULT_MAX_CLASSES) -> Container:
    store = JsonFileStore(path)
    return _wire(
        StorageBackend.JSON,
        JsonClassRepository(store),
        JsonStudentRepository(store),
        JsonAttendanceRepository(store),
        max_classes=max_classes,
    )


def build_mysql_container(db_config: dict, *, max_classes: int = DEFAULT_MAX_CLASSES) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(db_config))
    return _wire(
        StorageBackend.MYSQL,
        MySQLClassRepository(conn),
        MySQLStudentRepository(conn),
        MySQLAttendanceRepository(conn),
        max_classes=max_classes,
    )


def build_container(
    *,
    backend: str,
    json_path: str | Path | None = None,
    db_config: dict | None = None,
    max_classes: int = DEFAULT_MAX_CLASSES,
) -> Container:
    try:
        kind = StorageBackend(str(backend).lower())
    except ValueError:
        raise ValidationError(f"Unknown storage backend: {backend}")

    if kind == StorageBackend.MYSQL:
        if not db_config:
            raise ValidationError("DB_CONFIG is required for the mysql backend")
        return build_mysql_container(db_config, max_classes=max_classes)

    if not json_path:
        raise ValidationError("JSON_STORE_PATH is required for the json backend")
    return build_json_container(json_path, max_classes=max_classes)
