from __future__ import annotations

import pytest

from src.class_attendance.class_attendance.container import build_json_container


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "attendance.json"


@pytest.fixture
def container(store_path):
    return build_json_container(store_path)


@pytest.fixture
def school_class(container):
    return container.class_service.add("Class C")


@pytest.fixture
def roster(container, school_class):
    """Students A (Tr. No. 1, division X) and B (Tr. No. 2, division Y)."""
    a = container.student_service.add(
        tr_no="1", name="Alice", its_no="ITS-1", class_id=school_class.class_id, division="X", subject="Math"
    )
    b = container.student_service.add(
        tr_no="2", name="Bob", its_no="ITS-2", class_id=school_class.class_id, division="Y"
    )
    return a, b


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.class_attendance.class_attendance import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()
