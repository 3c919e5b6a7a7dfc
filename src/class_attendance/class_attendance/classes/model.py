from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SchoolClass:
    """Thực thể miền (domain): Lớp học / môn học."""

    class_id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.class_id, "name": self.name}
