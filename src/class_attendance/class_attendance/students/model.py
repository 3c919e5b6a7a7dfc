from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Thực thể miền (domain): Học viên.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    student_id: str
    tr_no: str
    name: str
    its_no: str
    class_id: str
    division: Optional[str] = None
    subject: Optional[str] = None
    photo: Optional[str] = None

    def sort_value(self, field: str) -> str:
        value = {
            "trNo": self.tr_no,
            "name": self.name,
            "itsNo": self.its_no,
            "division": self.division,
            "subject": self.subject,
        }[field]
        return (value or "").lower()

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "trNo": self.tr_no,
            "name": self.name,
            "itsNo": self.its_no,
            "classId": self.class_id,
            "division": self.division,
            "subject": self.subject,
            "photo": self.photo,
        }
