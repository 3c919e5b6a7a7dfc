from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Sequence

from ..classes.repository import ClassRepository
from ..common.validators import optional_text, require_non_empty
from ..core.constants import STUDENT_SORT_FIELDS
from ..core.exceptions import DuplicateError, NotFoundError, ValidationError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: manage the roster of each class."""

    def __init__(self, students: StudentRepository, classes: ClassRepository):
        self._students = students
        self._classes = classes

    def _check_unique(self, *, tr_no: str, its_no: str, exclude_id: Optional[str] = None) -> None:
        if self._students.find_by_tr_no(tr_no, exclude_id=exclude_id):
            raise DuplicateError("Tr. No. already exists")
        if self._students.find_by_its_no(its_no, exclude_id=exclude_id):
            raise DuplicateError("ITS No. already exists")

    def _require_class(self, class_id: Optional[str]) -> str:
        class_id = require_non_empty(class_id, "Class")
        if not self._classes.get_by_id(class_id):
            raise ValidationError("Class does not exist")
        return class_id

    def get(self, student_id: str) -> Student:
        student = self._students.get_by_id(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return student

    def add(
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
        tr_no = require_non_empty(tr_no, "Tr. No.")
        name = require_non_empty(name, "Name")
        its_no = require_non_empty(its_no, "ITS No.")
        class_id = self._require_class(class_id)

        self._check_unique(tr_no=tr_no, its_no=its_no)

        student = self._students.create(
            tr_no=tr_no,
            name=name,
            its_no=its_no,
            class_id=class_id,
            division=optional_text(division),
            subject=optional_text(subject),
            photo=optional_text(photo),
        )
        logger.info("Added student %s (Tr. No. %s) to class %s", student.student_id, tr_no, class_id)
        return student

    def update(
        self,
        student_id: str,
        *,
        tr_no: str,
        name: str,
        its_no: str,
        class_id: str,
        division: Optional[str] = None,
        subject: Optional[str] = None,
        photo: Optional[str] = None,
    ) -> Student:
        current = self.get(student_id)

        updated = replace(
            current,
            tr_no=require_non_empty(tr_no, "Tr. No."),
            name=require_non_empty(name, "Name"),
            its_no=require_non_empty(its_no, "ITS No."),
            class_id=self._require_class(class_id),
            division=optional_text(division),
            subject=optional_text(subject),
            photo=optional_text(photo),
        )
        self._check_unique(tr_no=updated.tr_no, its_no=updated.its_no, exclude_id=current.student_id)

        self._students.update(updated)
        return updated

    def delete(self, student_id: str) -> None:
        if not self._students.delete(student_id):
            raise NotFoundError("Student not found")
        logger.info("Deleted student %s and their attendance", student_id)

    def list_students(
        self,
        *,
        class_id: Optional[str] = None,
        division: Optional[str] = None,
        search: Optional[str] = None,
        sort_field: str = "name",
        descending: bool = False,
    ) -> list[Student]:
        if sort_field not in STUDENT_SORT_FIELDS:
            raise ValidationError(f"Cannot sort by {sort_field}")

        if class_id and division:
            students = list(self._students.list_by_class_and_division(class_id, division))
        elif class_id:
            students = list(self._students.list_by_class(class_id))
        else:
            students = list(self._students.list_all())

        term = (search or "").strip().lower()
        if term:
            students = [
                s
                for s in students
                if term in s.name.lower() or term in s.tr_no.lower() or term in s.its_no.lower()
            ]

        students.sort(key=lambda s: s.sort_value(sort_field), reverse=descending)
        return students

    def list_divisions(self, class_id: str) -> Sequence[str]:
        return self._students.list_divisions(class_id)
