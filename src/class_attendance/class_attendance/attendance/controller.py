from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import formatted_date, get_today
from ..common.http import api_errors, arg, json_body, require_arg
from ..container import Container
from ..core.enums import AttendanceStatus, SheetMode
from ..core.exceptions import NotFoundError, ValidationError
from .service import parse_status


def register(app: Flask, container: Container) -> None:
    def _scope(data: dict):
        class_id = str(data.get("classId") or "").strip()
        if not class_id:
            raise ValidationError("Select a class first")
        container.class_service.get(class_id)
        return class_id, (str(data.get("division") or "").strip() or None)

    def _ready_sheet(data: dict):
        """Rebuild the sheet from the request and move it to READY."""
        class_id, division = _scope(data)
        sheet = container.open_sheet(
            class_id=class_id,
            date=str(data.get("date") or get_today()),
            division=division,
        )
        sheet.refresh()
        return sheet

    @app.route("/api/attendance/sheet", methods=["POST"], endpoint="attendance_sheet")
    @api_errors
    def attendance_sheet():
        sheet = _ready_sheet(json_body())
        message = "New attendance sheet created" if sheet.mode == SheetMode.NEW else "Editing existing attendance"
        return jsonify({"success": True, "message": message, "sheet": sheet.to_dict()})

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_records")
    @api_errors
    def attendance_records():
        records = container.attendance_service.records_for(
            require_arg("date"),
            class_id=arg("classId"),
            division=arg("division"),
        )
        return jsonify({"success": True, "records": [r.to_dict() for r in records]})

    @app.route("/api/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @api_errors
    def attendance_mark():
        data = json_body()
        record = container.attendance_service.mark(
            date=str(data.get("date") or get_today()),
            student_id=str(data.get("studentId") or ""),
            status=parse_status(data.get("status")),
            class_id=(str(data.get("classId")) if data.get("classId") else None),
        )
        return jsonify({"success": True, "record": record.to_dict()})

    @app.route("/api/attendance/toggle", methods=["POST"], endpoint="attendance_toggle")
    @api_errors
    def attendance_toggle():
        data = json_body()
        sheet = _ready_sheet(data)
        record = sheet.toggle(str(data.get("studentId") or ""))
        label = "Present" if record.status == AttendanceStatus.PRESENT else "Absent"
        return jsonify({"success": True, "message": f"{label} marked successfully", "sheet": sheet.to_dict()})

    @app.route("/api/attendance/roll", methods=["POST"], endpoint="attendance_roll")
    @api_errors
    def attendance_roll():
        data = json_body()
        tr_no = str(data.get("trNo") or "").strip()
        if not tr_no:
            raise ValidationError("Please enter a roll number")

        # Unknown numbers must not create the sheet as a side effect.
        class_id, division = _scope(data)
        roster = container.student_service.list_students(class_id=class_id, division=division)
        if not container.attendance_service.find_by_roll_number(tr_no, roster):
            raise NotFoundError(f"Student with roll number {tr_no} not found")

        sheet = _ready_sheet(data)
        student = sheet.mark_by_roll_number(tr_no)
        return jsonify({"success": True, "message": f"{student.name} marked present", "sheet": sheet.to_dict()})

    @app.route("/api/attendance/all-present", methods=["POST"], endpoint="attendance_all_present")
    @api_errors
    def attendance_all_present():
        sheet = _ready_sheet(json_body())
        count = sheet.mark_all_present()
        return jsonify({"success": True, "message": f"Marked {count} students present", "sheet": sheet.to_dict()})

    @app.route("/api/attendance/<date>", methods=["DELETE"], endpoint="attendance_delete_date")
    @api_errors
    def attendance_delete_date(date: str):
        deleted = container.attendance_service.delete_by_date(date)
        return jsonify({"success": True, "message": f"Deleted {deleted} attendance records", "deleted": deleted})

    @app.route("/api/attendance/dates", methods=["GET"], endpoint="attendance_dates")
    @api_errors
    def attendance_dates():
        class_id = arg("classId")
        if class_id:
            dates = container.attendance_service.get_dates_by_class(class_id)
        else:
            dates = container.attendance_service.get_all_dates()
        return jsonify(
            {
                "success": True,
                "dates": list(dates),
                "labels": [{"date": d, "label": formatted_date(d)} for d in dates],
            }
        )
