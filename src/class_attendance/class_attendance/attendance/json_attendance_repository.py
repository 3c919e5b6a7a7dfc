from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import ATTENDANCE_KEY, CLASSES_KEY, STUDENTS_KEY
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..database.json_store import JsonFileStore
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository


def _to_record(item: dict) -> AttendanceRecord:
    return AttendanceRecord(
        date=item["date"],
        class_id=str(item["classId"]),
        student_id=str(item["studentId"]),
        status=AttendanceStatus(item["status"]),
    )


class JsonAttendanceRepository(AttendanceRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def _records(self) -> list[AttendanceRecord]:
        return [_to_record(r) for r in self._store.read()[ATTENDANCE_KEY]]

    def get_for_student_and_date(self, student_id: str, date: str) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self._records() if r.student_id == str(student_id) and r.date == date),
            None,
        )

    def upsert(self, record: AttendanceRecord) -> None:
        with self._store.transaction() as doc:
            if not any(str(s["id"]) == record.student_id for s in doc[STUDENTS_KEY]):
                raise ValidationError("Student does not exist")

            for idx, r in enumerate(doc[ATTENDANCE_KEY]):
                if r["date"] == record.date and str(r["studentId"]) == record.student_id:
                    doc[ATTENDANCE_KEY][idx] = record.to_dict()
                    break
            else:
                doc[ATTENDANCE_KEY].append(record.to_dict())

    def bulk_insert(self, records: Sequence[AttendanceRecord]) -> int:
        with self._store.transaction() as doc:
            known = {str(s["id"]) for s in doc[STUDENTS_KEY]}
            taken = {(r["date"], str(r["studentId"])) for r in doc[ATTENDANCE_KEY]}
            inserted = 0
            for record in records:
                if record.student_id not in known:
                    raise ValidationError("Student does not exist")
                if (record.date, record.student_id) in taken:
                    continue
                doc[ATTENDANCE_KEY].append(record.to_dict())
                taken.add((record.date, record.student_id))
                inserted += 1
            return inserted

    def list_by_date(self, date: str) -> Sequence[AttendanceRecord]:
        return [r for r in self._records() if r.date == date]

    def list_by_date_and_class(self, date: str, class_id: str) -> Sequence[AttendanceRecord]:
        return [r for r in self._records() if r.date == date and r.class_id == str(class_id)]

    def list_for_class_in_range(self, class_id: str, start: str, end: str) -> Sequence[AttendanceRecord]:
        return [r for r in self._records() if r.class_id == str(class_id) and start <= r.date <= end]

    def delete_by_date(self, date: str) -> int:
        with self._store.transaction() as doc:
            before = len(doc[ATTENDANCE_KEY])
            doc[ATTENDANCE_KEY] = [r for r in doc[ATTENDANCE_KEY] if r["date"] != date]
            return before - len(doc[ATTENDANCE_KEY])

    def list_dates(self, class_id: Optional[str] = None) -> Sequence[str]:
        records = self._records()
        if class_id is not None:
            records = [r for r in records if r.class_id == str(class_id)]
        return sorted({r.date for r in records}, reverse=True)

    def get_report_rows(
        self,
        *,
        start: Optional[str] = None,
        end: Optional[str] = None,
        class_id: Optional[str] = None,
        division: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        doc = self._store.read()
        classes = {str(c["id"]): c for c in doc[CLASSES_KEY]}
        students = {str(s["id"]): s for s in doc[STUDENTS_KEY]}

        rows: list[AttendanceReportRow] = []
        for r in doc[ATTENDANCE_KEY]:
            if start and r["date"] < start:
                continue
            if end and r["date"] > end:
                continue
            if class_id and str(r["classId"]) != str(class_id):
                continue

            student = students.get(str(r["studentId"]))
            class_data = classes.get(str(r["classId"]))
            if not student or not class_data:
                continue
            if division and student.get("division") != division:
                continue

            rows.append(
                AttendanceReportRow(
                    date=r["date"],
                    class_name=class_data["name"],
                    student_name=student["name"],
                    tr_no=student["trNo"],
                    its_no=student["itsNo"],
                    status=AttendanceStatus(r["status"]),
                    division=student.get("division"),
                    subject=student.get("subject"),
                )
            )

        rows.sort(key=lambda row: (row.date, row.class_name, row.tr_no))
        return rows
