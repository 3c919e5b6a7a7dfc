from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_for_student_and_date(self, student_id: str, date: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def upsert(self, record: AttendanceRecord) -> None:
        """Insert, or overwrite status and class of the record keyed by (date, student_id)."""

        raise NotImplementedError

    def bulk_insert(self, records: Sequence[AttendanceRecord]) -> int:
        raise NotImplementedError

    def list_by_date(self, date: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_by_date_and_class(self, date: str, class_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_class_in_range(self, class_id: str, start: str, end: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def delete_by_date(self, date: str) -> int:
        """Delete the whole sheet for a date, across all classes."""

        raise NotImplementedError

    def list_dates(self, class_id: Optional[str] = None) -> Sequence[str]:
        """Distinct dates with records, newest first."""

        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start: Optional[str] = None,
        end: Optional[str] = None,
        class_id: Optional[str] = None,
        division: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        """Attendance joined with class and student; empty bounds mean no filter."""

        raise NotImplementedError
