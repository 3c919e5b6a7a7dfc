from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SchoolClass


class ClassRepository(Protocol):
    """Giao diện repository cho lớp học.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp kho dữ liệu cụ thể.
    """

    def list_all(self) -> Sequence[SchoolClass]:
        raise NotImplementedError

    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        raise NotImplementedError

    def create(self, *, name: str) -> SchoolClass:
        raise NotImplementedError

    def update(self, *, class_id: str, name: str) -> bool:
        raise NotImplementedError

    def delete(self, class_id: str) -> bool:
        """Delete the class together with its students and their attendance."""

        raise NotImplementedError
