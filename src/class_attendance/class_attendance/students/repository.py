from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def list_by_class(self, class_id: str) -> Sequence[Student]:
        raise NotImplementedError

    def list_by_class_and_division(self, class_id: str, division: str) -> Sequence[Student]:
        raise NotImplementedError

    def get_by_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def find_by_tr_no(self, tr_no: str, *, exclude_id: Optional[str] = None) -> Optional[Student]:
        raise NotImplementedError

    def find_by_its_no(self, its_no: str, *, exclude_id: Optional[str] = None) -> Optional[Student]:
        raise NotImplementedError

    def create(
        self,
        *,
        tr_no: str,
        name: str,
        its_no: str,
        class_id: str,
        division: Optional[str] = None,
        subject: Optional[str] = None,
        photo: Optional[str] = None,
    ) -> Student:
        raise NotImplementedError

    def update(self, student: Student) -> bool:
        raise NotImplementedError

    def delete(self, student_id: str) -> bool:
        """Delete the student and every attendance record that references it."""

        raise NotImplementedError

    def list_divisions(self, class_id: str) -> Sequence[str]:
        """Distinct non-empty divisions among the class's students, sorted."""

        raise NotImplementedError
