from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import api_errors, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes", methods=["GET"], endpoint="list_classes")
    @api_errors
    def list_classes():
        classes = container.class_service.list_classes()
        return jsonify({"success": True, "classes": [c.to_dict() for c in classes]})

    @app.route("/api/classes", methods=["POST"], endpoint="add_class")
    @api_errors
    def add_class():
        created = container.class_service.add(json_body().get("name", ""))
        return jsonify({"success": True, "message": "Class added successfully", "class": created.to_dict()}), 201

    @app.route("/api/classes/<class_id>", methods=["PUT"], endpoint="rename_class")
    @api_errors
    def rename_class(class_id: str):
        updated = container.class_service.rename(class_id, json_body().get("name", ""))
        return jsonify({"success": True, "class": updated.to_dict()})

    @app.route("/api/classes/<class_id>", methods=["DELETE"], endpoint="delete_class")
    @api_errors
    def delete_class(class_id: str):
        container.class_service.delete(class_id)
        return jsonify({"success": True, "message": "Class deleted"})

    @app.route("/api/classes/<class_id>/divisions", methods=["GET"], endpoint="list_divisions")
    @api_errors
    def list_divisions(class_id: str):
        return jsonify({"success": True, "divisions": list(container.student_service.list_divisions(class_id))})
