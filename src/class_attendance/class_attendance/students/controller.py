from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify

from ..common.http import api_errors, arg, json_body
from ..container import Container


def _text(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    return None if value is None else str(value)


def _student_fields(data: dict) -> dict:
    return {
        "tr_no": _text(data, "trNo") or "",
        "name": _text(data, "name") or "",
        "its_no": _text(data, "itsNo") or "",
        "class_id": _text(data, "classId") or "",
        "division": _text(data, "division"),
        "subject": _text(data, "subject"),
        "photo": _text(data, "photo"),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/students", methods=["GET"], endpoint="list_students")
    @api_errors
    def list_students():
        students = container.student_service.list_students(
            class_id=arg("classId"),
            division=arg("division"),
            search=arg("search"),
            sort_field=arg("sort") or "name",
            descending=(arg("direction") or "asc").lower() == "desc",
        )
        return jsonify({"success": True, "students": [s.to_dict() for s in students]})

    @app.route("/api/students", methods=["POST"], endpoint="add_student")
    @api_errors
    def add_student():
        student = container.student_service.add(**_student_fields(json_body()))
        return jsonify({"success": True, "message": "Student added successfully", "student": student.to_dict()}), 201

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="update_student")
    @api_errors
    def update_student(student_id: str):
        student = container.student_service.update(student_id, **_student_fields(json_body()))
        return jsonify({"success": True, "message": "Student updated successfully", "student": student.to_dict()})

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="delete_student")
    @api_errors
    def delete_student(student_id: str):
        container.student_service.delete(student_id)
        return jsonify({"success": True, "message": "Student deleted"})
