from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.constants import ATTENDANCE_KEY, CLASSES_KEY, STUDENTS_KEY
from ..core.exceptions import DuplicateError, ValidationError
from ..database.json_store import JsonFileStore
from .model import Student
from .repository import StudentRepository


def _to_student(item: dict) -> Student:
    return Student(
        student_id=str(item["id"]),
        tr_no=item["trNo"],
        name=item["name"],
        its_no=item["itsNo"],
        class_id=str(item["classId"]),
        division=item.get("division"),
        subject=item.get("subject"),
        photo=item.get("photo"),
    )


def _check_constraints(doc: dict, item: dict) -> None:
    others = [s for s in doc[STUDENTS_KEY] if str(s["id"]) != str(item["id"])]
    if any(s["trNo"] == item["trNo"] for s in others):
        raise DuplicateError("Tr. No. already exists")
    if any(s["itsNo"] == item["itsNo"] for s in others):
        raise DuplicateError("ITS No. already exists")
    if not any(str(c["id"]) == str(item["classId"]) for c in doc[CLASSES_KEY]):
        raise ValidationError("Class does not exist")


class JsonStudentRepository(StudentRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def _students(self) -> Iterable[Student]:
        return (_to_student(s) for s in self._store.read()[STUDENTS_KEY])

    def list_all(self) -> Sequence[Student]:
        return list(self._students())

    def list_by_class(self, class_id: str) -> Sequence[Student]:
        return [s for s in self._students() if s.class_id == str(class_id)]

    def list_by_class_and_division(self, class_id: str, division: str) -> Sequence[Student]:
        return [s for s in self._students() if s.class_id == str(class_id) and s.division == division]

    def get_by_id(self, student_id: str) -> Optional[Student]:
        return next((s for s in self._students() if s.student_id == str(student_id)), None)

    def find_by_tr_no(self, tr_no: str, *, exclude_id: Optional[str] = None) -> Optional[Student]:
        return next(
            (s for s in self._students() if s.tr_no == tr_no and s.student_id != exclude_id),
            None,
        )

    def find_by_its_no(self, its_no: str, *, exclude_id: Optional[str] = None) -> Optional[Student]:
        return next(
            (s for s in self._students() if s.its_no == its_no and s.student_id != exclude_id),
            None,
        )

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
        with self._store.transaction() as doc:
            item = {
                "id": self._store.new_id(s["id"] for s in doc[STUDENTS_KEY]),
                "trNo": tr_no,
                "name": name,
                "itsNo": its_no,
                "classId": str(class_id),
                "division": division,
                "subject": subject,
                "photo": photo,
            }
            _check_constraints(doc, item)
            doc[STUDENTS_KEY].append(item)
        return _to_student(item)

    def update(self, student: Student) -> bool:
        item = student.to_dict()
        with self._store.transaction() as doc:
            for idx, s in enumerate(doc[STUDENTS_KEY]):
                if str(s["id"]) == student.student_id:
                    _check_constraints(doc, item)
                    doc[STUDENTS_KEY][idx] = item
                    return True
        return False

    def delete(self, student_id: str) -> bool:
        student_id = str(student_id)
        with self._store.transaction() as doc:
            before = len(doc[STUDENTS_KEY])
            doc[STUDENTS_KEY] = [s for s in doc[STUDENTS_KEY] if str(s["id"]) != student_id]
            doc[ATTENDANCE_KEY] = [r for r in doc[ATTENDANCE_KEY] if str(r["studentId"]) != student_id]
            return len(doc[STUDENTS_KEY]) < before

    def list_divisions(self, class_id: str) -> Sequence[str]:
        return sorted({s.division for s in self.list_by_class(class_id) if s.division})
