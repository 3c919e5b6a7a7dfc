"""Attendance sheet: the per-date marking workflow.

UNSET --refresh()--> INITIALIZING --> READY (mode NEW or EDIT)
Selecting another date, or deleting the sheet, returns to UNSET.
"""
from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import DateLike, to_iso
from ..core.enums import AttendanceStatus, SheetMode, SheetState
from ..core.exceptions import ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .service import AttendanceService, StudentStatus


class AttendanceSheet:
    def __init__(
        self,
        service: AttendanceService,
        students: StudentRepository,
        *,
        class_id: str,
        division: Optional[str] = None,
    ):
        self._service = service
        self._students_repo = students
        self._class_id = str(class_id)
        self._division = division or None

        self._date: Optional[str] = None
        self._state = SheetState.UNSET
        self._mode: Optional[SheetMode] = None
        self._students: list[Student] = []
        self._records: list[AttendanceRecord] = []

    @property
    def state(self) -> SheetState:
        return self._state

    @property
    def mode(self) -> Optional[SheetMode]:
        return self._mode

    @property
    def date(self) -> Optional[str]:
        return self._date

    @property
    def students(self) -> Sequence[Student]:
        return list(self._students)

    @property
    def records(self) -> Sequence[AttendanceRecord]:
        return list(self._records)

    def select_date(self, date: DateLike) -> None:
        self._date = to_iso(date)
        self._state = SheetState.UNSET
        self._mode = None
        self._records = []

    def _load_students(self) -> list[Student]:
        if self._division:
            return list(self._students_repo.list_by_class_and_division(self._class_id, self._division))
        return list(self._students_repo.list_by_class(self._class_id))

    def _reload(self) -> None:
        self._records = list(self._service.records_for(self._date, class_id=self._class_id, division=self._division))

    def _require_ready(self) -> None:
        if self._state != SheetState.READY:
            raise ValidationError("Set the attendance date first")

    def refresh(self) -> SheetMode:
        """Set/Refresh Date: open the existing sheet or start a new one marked absent."""
        if not self._date:
            raise ValidationError("Select a date first")

        self._state = SheetState.INITIALIZING
        self._students = self._load_students()
        self._reload()

        if self._records:
            self._mode = SheetMode.EDIT
        else:
            self._service.initialize_sheet(date=self._date, students=self._students)
            self._reload()
            self._mode = SheetMode.NEW

        self._state = SheetState.READY
        return self._mode

    def mark_by_roll_number(self, tr_no: str) -> Optional[Student]:
        self._require_ready()
        student = self._service.mark_by_roll_number(date=self._date, tr_no=tr_no, students=self._students)
        self._reload()
        return student

    def toggle(self, student_id: str) -> AttendanceRecord:
        self._require_ready()
        if not any(s.student_id == str(student_id) for s in self._students):
            raise ValidationError("Student is not on this sheet")
        record = self._service.toggle(date=self._date, student_id=student_id)
        self._reload()
        return record

    def mark_all_present(self) -> int:
        self._require_ready()
        count = self._service.mark_all_present(date=self._date, students=self._students)
        self._reload()
        return count

    def delete_all(self) -> int:
        self._require_ready()
        deleted = self._service.delete_by_date(self._date)
        self._state = SheetState.UNSET
        self._mode = None
        self._records = []
        return deleted

    def statuses(self) -> list[StudentStatus]:
        return self._service.statuses(self._records, self._students)

    def to_dict(self) -> dict:
        statuses = self.statuses()
        return {
            "date": self._date,
            "classId": self._class_id,
            "division": self._division,
            "state": self._state.value,
            "mode": self._mode.value if self._mode else None,
            "students": [s.to_dict() for s in statuses],
            "presentCount": sum(1 for s in statuses if s.status == AttendanceStatus.PRESENT),
            "total": len(statuses),
        }
