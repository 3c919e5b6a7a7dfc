from __future__ import annotations

import logging
from typing import Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_MAX_CLASSES
from ..core.exceptions import NotFoundError, ValidationError
from .model import SchoolClass
from .repository import ClassRepository

logger = logging.getLogger(__name__)


class ClassService:
    """Use case: manage classes/subjects (admin setup)."""

    def __init__(self, classes: ClassRepository, *, max_classes: int = DEFAULT_MAX_CLASSES):
        self._classes = classes
        self._max_classes = int(max_classes)

    def list_classes(self) -> Sequence[SchoolClass]:
        return self._classes.list_all()

    def get(self, class_id: str) -> SchoolClass:
        school_class = self._classes.get_by_id(class_id)
        if not school_class:
            raise NotFoundError("Class not found")
        return school_class

    def add(self, name: str) -> SchoolClass:
        name = require_non_empty(name, "Class name")

        if len(self._classes.list_all()) >= self._max_classes:
            raise ValidationError(f"Maximum of {self._max_classes} classes allowed")

        created = self._classes.create(name=name)
        logger.info("Added class %s (%s)", created.class_id, created.name)
        return created

    def rename(self, class_id: str, name: str) -> SchoolClass:
        name = require_non_empty(name, "Class name")
        self.get(class_id)
        self._classes.update(class_id=class_id, name=name)
        return SchoolClass(class_id=str(class_id), name=name)

    def delete(self, class_id: str) -> None:
        if not self._classes.delete(class_id):
            raise NotFoundError("Class not found")
        logger.info("Deleted class %s with its students and attendance", class_id)
