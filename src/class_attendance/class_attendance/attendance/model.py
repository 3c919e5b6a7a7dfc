from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi điểm danh.

    Khoá tự nhiên là (date, student_id): mỗi học viên tối đa một bản ghi mỗi ngày.
    """

    date: str
    class_id: str
    student_id: str
    status: AttendanceStatus

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "classId": self.class_id,
            "studentId": self.student_id,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model phục vụ báo cáo/xuất file (tối ưu cho truy vấn)."""

    date: str
    class_name: str
    student_name: str
    tr_no: str
    its_no: str
    status: AttendanceStatus
    division: Optional[str] = None
    subject: Optional[str] = None
