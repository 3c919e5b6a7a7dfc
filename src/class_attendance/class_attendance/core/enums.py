from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Trạng thái điểm danh lưu trong kho dữ liệu."""

    PRESENT = "present"
    ABSENT = "absent"

    def flipped(self) -> "AttendanceStatus":
        return AttendanceStatus.ABSENT if self is AttendanceStatus.PRESENT else AttendanceStatus.PRESENT


class ReportMode(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class SheetState(str, Enum):
    """Vòng đời của một bảng điểm danh theo ngày."""

    UNSET = "unset"
    INITIALIZING = "initializing"
    READY = "ready"


class SheetMode(str, Enum):
    NEW = "new"
    EDIT = "edit"


class StorageBackend(str, Enum):
    JSON = "json"
    MYSQL = "mysql"
