from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import ATTENDANCE_KEY, CLASSES_KEY, STUDENTS_KEY
from ..database.json_store import JsonFileStore
from .model import SchoolClass
from .repository import ClassRepository


def _to_class(item: dict) -> SchoolClass:
    return SchoolClass(class_id=str(item["id"]), name=item["name"])


class JsonClassRepository(ClassRepository):
    def __init__(self, store: JsonFileStore):
        self._store = store

    def list_all(self) -> Sequence[SchoolClass]:
        return [_to_class(c) for c in self._store.read()[CLASSES_KEY]]

    def get_by_id(self, class_id: str) -> Optional[SchoolClass]:
        for c in self._store.read()[CLASSES_KEY]:
            if str(c["id"]) == str(class_id):
                return _to_class(c)
        return None

    def create(self, *, name: str) -> SchoolClass:
        with self._store.transaction() as doc:
            item = {"id": self._store.new_id(c["id"] for c in doc[CLASSES_KEY]), "name": name}
            doc[CLASSES_KEY].append(item)
        return _to_class(item)

    def update(self, *, class_id: str, name: str) -> bool:
        with self._store.transaction() as doc:
            for c in doc[CLASSES_KEY]:
                if str(c["id"]) == str(class_id):
                    c["name"] = name
                    return True
        return False

    def delete(self, class_id: str) -> bool:
        class_id = str(class_id)
        with self._store.transaction() as doc:
            before = len(doc[CLASSES_KEY])
            doc[CLASSES_KEY] = [c for c in doc[CLASSES_KEY] if str(c["id"]) != class_id]

            removed_students = {str(s["id"]) for s in doc[STUDENTS_KEY] if str(s["classId"]) == class_id}
            doc[STUDENTS_KEY] = [s for s in doc[STUDENTS_KEY] if str(s["classId"]) != class_id]
            doc[ATTENDANCE_KEY] = [
                r
                for r in doc[ATTENDANCE_KEY]
                if str(r["classId"]) != class_id and str(r["studentId"]) not in removed_students
            ]
            return len(doc[CLASSES_KEY]) < before
