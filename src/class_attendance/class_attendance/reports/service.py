from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import DateLike, to_iso
from ..core.constants import CSV_HEADER, DATE_CSV_HEADER, STUDENT_SORT_FIELDS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository


@dataclass(frozen=True)
class AttendanceStats:
    total_days: int
    present_count: dict[str, int] = field(default_factory=dict)
    absent_count: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "totalDays": self.total_days,
            "presentCount": dict(self.present_count),
            "absentCount": dict(self.absent_count),
        }


@dataclass(frozen=True)
class DailyReport:
    date: str
    present: list[Student]
    absent: list[Student]


@dataclass(frozen=True)
class StudentSummary:
    student: Student
    present_days: int
    absent_days: int
    total_days: int
    attendance_rate: float

    def to_dict(self) -> dict:
        return {
            **self.student.to_dict(),
            "presentDays": self.present_days,
            "absentDays": self.absent_days,
            "totalDays": self.total_days,
            "attendanceRate": self.attendance_rate,
        }


@dataclass(frozen=True)
class PeriodReport:
    start: str
    end: str
    total_days: int
    rows: list[StudentSummary]
    total_present: int
    total_absent: int


@dataclass(frozen=True)
class CsvExport:
    filename: str
    content: str


def attendance_rate(present_days: int, total_days: int) -> float:
    if total_days <= 0:
        return 0.0
    return round(present_days / total_days * 100, 2)


def _write_csv(header: Sequence[str], rows: Sequence[Sequence[object]]) -> str:
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return out.getvalue()


class ReportService:
    """Use case: aggregate attendance into daily/weekly/monthly reports and CSV exports."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    def _roster(self, class_id: str, division: Optional[str]) -> list[Student]:
        if division:
            return list(self._students.list_by_class_and_division(class_id, division))
        return list(self._students.list_by_class(class_id))

    def get_attendance_stats(self, class_id: str, start: DateLike, end: DateLike) -> AttendanceStats:
        start_s, end_s = to_iso(start), to_iso(end)
        if start_s > end_s:
            raise ValidationError("Start date must not be after end date")

        records = self._attendance.list_for_class_in_range(class_id, start_s, end_s)

        present: dict[str, int] = {}
        absent: dict[str, int] = {}
        for r in records:
            bucket = present if r.status == AttendanceStatus.PRESENT else absent
            bucket[r.student_id] = bucket.get(r.student_id, 0) + 1

        return AttendanceStats(
            total_days=len({r.date for r in records}),
            present_count=present,
            absent_count=absent,
        )

    def daily_report(self, class_id: str, date: DateLike, *, division: Optional[str] = None) -> DailyReport:
        day = to_iso(date)
        roster = self._roster(class_id, division)
        present_ids = {
            r.student_id
            for r in self._attendance.list_by_date_and_class(day, class_id)
            if r.status == AttendanceStatus.PRESENT
        }

        present = [s for s in roster if s.student_id in present_ids]
        absent = [s for s in roster if s.student_id not in present_ids]
        return DailyReport(date=day, present=present, absent=absent)

    def period_report(
        self,
        class_id: str,
        start: DateLike,
        end: DateLike,
        *,
        division: Optional[str] = None,
    ) -> PeriodReport:
        """Per-student presence over a range.

        Students with no records in range stay in the report at 0%.
        """

        stats = self.get_attendance_stats(class_id, start, end)
        rows: list[StudentSummary] = []
        for s in self._roster(class_id, division):
            present_days = stats.present_count.get(s.student_id, 0)
            rows.append(
                StudentSummary(
                    student=s,
                    present_days=present_days,
                    absent_days=stats.absent_count.get(s.student_id, 0),
                    total_days=stats.total_days,
                    attendance_rate=attendance_rate(present_days, stats.total_days),
                )
            )

        total_present = sum(r.present_days for r in rows)
        return PeriodReport(
            start=to_iso(start),
            end=to_iso(end),
            total_days=stats.total_days,
            rows=rows,
            total_present=total_present,
            total_absent=len(rows) * stats.total_days - total_present,
        )

    def export_attendance_csv(
        self,
        start: Optional[DateLike] = None,
        end: Optional[DateLike] = None,
        *,
        class_id: Optional[str] = None,
        division: Optional[str] = None,
    ) -> CsvExport:
        start_s = to_iso(start) if start else None
        end_s = to_iso(end) if end else None

        rows = self._attendance.get_report_rows(start=start_s, end=end_s, class_id=class_id, division=division)
        content = _write_csv(
            CSV_HEADER,
            [
                [r.date, r.class_name, r.division or "", r.subject or "", r.student_name, r.tr_no, r.its_no, r.status.value]
                for r in rows
            ],
        )

        span = "_".join(part.replace("-", "") for part in (start_s, end_s) if part) or "all"
        return CsvExport(filename=f"attendance_report_{span}.csv", content=content)

    def export_date_csv(
        self,
        class_id: str,
        date: DateLike,
        *,
        view: AttendanceStatus,
        division: Optional[str] = None,
        sort_field: str = "name",
        descending: bool = False,
    ) -> CsvExport:
        """One date's present (or absent) list, as offered from the date report."""
        if sort_field not in STUDENT_SORT_FIELDS:
            raise ValidationError(f"Cannot sort by {sort_field}")

        report = self.daily_report(class_id, date, division=division)
        students = report.present if view == AttendanceStatus.PRESENT else report.absent
        students = sorted(students, key=lambda s: s.sort_value(sort_field), reverse=descending)

        content = _write_csv(
            DATE_CSV_HEADER,
            [[s.tr_no, s.name, s.division or "", s.subject or "", view.value] for s in students],
        )
        return CsvExport(filename=f"attendance_{report.date.replace('-', '')}_{view.value}.csv", content=content)
