from __future__ import annotations

import pytest

from src.class_attendance.class_attendance.core.enums import AttendanceStatus
from src.class_attendance.class_attendance.core.exceptions import DuplicateError, NotFoundError, ValidationError


def _add(container, class_id, tr_no, its_no, name="Someone", division=None):
    return container.student_service.add(
        tr_no=tr_no, name=name, its_no=its_no, class_id=class_id, division=division
    )


def test_add_student_normalizes_optional_fields(container, school_class):
    student = container.student_service.add(
        tr_no=" 7 ", name="Zara", its_no="ITS-7", class_id=school_class.class_id, division="  ", subject=""
    )

    assert student.tr_no == "7"
    assert student.division is None
    assert student.subject is None
    assert container.student_service.get(student.student_id) == student


def test_duplicate_tr_no_is_rejected_and_roster_unchanged(container, school_class, roster):
    with pytest.raises(DuplicateError, match="Tr. No. already exists"):
        _add(container, school_class.class_id, "1", "ITS-99")

    assert len(container.student_service.list_students()) == 2


def test_duplicate_its_no_is_rejected(container, school_class, roster):
    with pytest.raises(DuplicateError, match="ITS No. already exists"):
        _add(container, school_class.class_id, "99", "ITS-2")


def test_required_fields_and_unknown_class(container, school_class):
    with pytest.raises(ValidationError, match="Name is required"):
        container.student_service.add(tr_no="1", name="", its_no="X", class_id=school_class.class_id)
    with pytest.raises(ValidationError, match="Class does not exist"):
        _add(container, "missing", "1", "X")


def test_update_may_keep_own_numbers(container, school_class, roster):
    a, b = roster

    updated = container.student_service.update(
        a.student_id, tr_no="1", name="Alice B.", its_no="ITS-1", class_id=school_class.class_id, division="X"
    )

    assert updated.name == "Alice B."
    assert container.student_service.get(a.student_id).name == "Alice B."
    with pytest.raises(DuplicateError):
        container.student_service.update(
            a.student_id, tr_no=b.tr_no, name="Alice", its_no="ITS-1", class_id=school_class.class_id
        )


def test_delete_student_removes_their_attendance(container, roster):
    a, b = roster
    for s in roster:
        container.attendance_service.mark(date="2024-01-01", student_id=s.student_id, status=AttendanceStatus.PRESENT)

    container.student_service.delete(a.student_id)

    assert [r.student_id for r in container.attendance_service.get_by_date("2024-01-01")] == [b.student_id]
    with pytest.raises(NotFoundError):
        container.student_service.delete(a.student_id)


def test_list_filters_search_and_sort(container, school_class, roster):
    _add(container, school_class.class_id, "10", "ITS-10", name="Carl", division="X")
    list_students = container.student_service.list_students

    assert [s.name for s in list_students(class_id=school_class.class_id, division="X")] == ["Alice", "Carl"]
    assert [s.name for s in list_students(search="its-2")] == ["Bob"]
    assert [s.name for s in list_students(search="AL")] == ["Alice"]
    assert [s.tr_no for s in list_students(sort_field="trNo", descending=True)] == ["2", "10", "1"]
    with pytest.raises(ValidationError):
        list_students(sort_field="photo")


def test_divisions_are_distinct_and_sorted(container, school_class, roster):
    _add(container, school_class.class_id, "3", "ITS-3", division="X")
    _add(container, school_class.class_id, "4", "ITS-4")

    assert list(container.student_service.list_divisions(school_class.class_id)) == ["X", "Y"]
