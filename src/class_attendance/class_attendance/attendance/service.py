from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.datetime_utils import DateLike, to_iso
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudentStatus:
    student: Student
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {**self.student.to_dict(), "status": self.status.value}


def parse_status(value) -> AttendanceStatus:
    try:
        return AttendanceStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError("Status must be 'present' or 'absent'")


class AttendanceService:
    """Use case: mark and query daily attendance."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    def _student(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise ValidationError("Student does not exist")
        return student

    def mark(
        self,
        *,
        date: DateLike,
        student_id: str,
        status: AttendanceStatus,
        class_id: Optional[str] = None,
    ) -> AttendanceRecord:
        student = self._student(student_id)
        if class_id and str(class_id) != student.class_id:
            raise ValidationError("Student does not belong to this class")

        record = AttendanceRecord(
            date=to_iso(date),
            class_id=student.class_id,
            student_id=student.student_id,
            status=status,
        )
        self._attendance.upsert(record)
        return record

    def toggle(self, *, date: DateLike, student_id: str) -> AttendanceRecord:
        """Flip present/absent; a student without a record counts as absent."""
        day = to_iso(date)
        existing = self._attendance.get_for_student_and_date(student_id, day)
        current = existing.status if existing else AttendanceStatus.ABSENT
        return self.mark(date=day, student_id=student_id, status=current.flipped())

    def find_by_roll_number(self, tr_no: str, students: Sequence[Student]) -> Optional[Student]:
        tr_no = (tr_no or "").strip()
        return next((s for s in students if s.tr_no == tr_no), None)

    def mark_by_roll_number(self, *, date: DateLike, tr_no: str, students: Sequence[Student]) -> Optional[Student]:
        """Mark the matching student present; None means no student has that Tr. No."""
        student = self.find_by_roll_number(tr_no, students)
        if not student:
            logger.info("Roll number %r not found", tr_no)
            return None

        self.mark(date=date, student_id=student.student_id, status=AttendanceStatus.PRESENT)
        return student

    def mark_all_present(self, *, date: DateLike, students: Sequence[Student]) -> int:
        # One write per student, no rollback if a later write fails.
        day = to_iso(date)
        for student in students:
            self.mark(date=day, student_id=student.student_id, status=AttendanceStatus.PRESENT)
        return len(students)

    def initialize_sheet(self, *, date: DateLike, students: Sequence[Student]) -> int:
        """Bulk-insert an absent record for every student on the date."""
        day = to_iso(date)
        records = [
            AttendanceRecord(date=day, class_id=s.class_id, student_id=s.student_id, status=AttendanceStatus.ABSENT)
            for s in students
        ]
        inserted = self._attendance.bulk_insert(records)
        logger.info("Initialized attendance sheet for %s (%s students)", day, inserted)
        return inserted

    def delete_by_date(self, date: DateLike) -> int:
        day = to_iso(date)
        deleted = self._attendance.delete_by_date(day)
        logger.info("Deleted %s attendance records for %s", deleted, day)
        return deleted

    def get_by_date(self, date: DateLike) -> Sequence[AttendanceRecord]:
        return self._attendance.list_by_date(to_iso(date))

    def get_by_date_and_class(self, date: DateLike, class_id: str) -> Sequence[AttendanceRecord]:
        return self._attendance.list_by_date_and_class(to_iso(date), class_id)

    def get_by_date_and_class_and_division(
        self, date: DateLike, class_id: str, division: str
    ) -> Sequence[AttendanceRecord]:
        members = {s.student_id for s in self._students.list_by_class_and_division(class_id, division)}
        return [r for r in self.get_by_date_and_class(date, class_id) if r.student_id in members]

    def records_for(
        self, date: DateLike, *, class_id: Optional[str] = None, division: Optional[str] = None
    ) -> Sequence[AttendanceRecord]:
        if division and not class_id:
            raise ValidationError("Select a class to filter by division")
        if class_id and division:
            return self.get_by_date_and_class_and_division(date, class_id, division)
        if class_id:
            return self.get_by_date_and_class(date, class_id)
        return self.get_by_date(date)

    def statuses(self, records: Sequence[AttendanceRecord], students: Sequence[Student]) -> list[StudentStatus]:
        by_student = {r.student_id: r.status for r in records}
        return [StudentStatus(student=s, status=by_student.get(s.student_id, AttendanceStatus.ABSENT)) for s in students]

    def get_all_dates(self) -> Sequence[str]:
        return self._attendance.list_dates()

    def get_dates_by_class(self, class_id: str) -> Sequence[str]:
        return self._attendance.list_dates(class_id)
