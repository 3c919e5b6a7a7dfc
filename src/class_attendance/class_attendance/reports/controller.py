from __future__ import annotations

from flask import Flask, jsonify

from ..attendance.service import parse_status
from ..common.datetime_utils import day_name, formatted_date, parse_iso_date, report_range, to_iso
from ..common.http import api_errors, arg, csv_response, require_arg
from ..container import Container
from ..core.enums import ReportMode
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    def _range():
        """Explicit start/end win; otherwise derive them from mode + anchor date."""
        start, end = arg("start"), arg("end")
        if start and end:
            return start, end
        if start or end:
            raise ValidationError("Provide both start and end, or neither")

        try:
            mode = ReportMode(arg("mode") or ReportMode.WEEKLY.value)
        except ValueError:
            raise ValidationError("mode must be daily, weekly or monthly")
        anchor = arg("date")
        return report_range(mode, parse_iso_date(to_iso(anchor)) if anchor else None)

    @app.route("/api/reports/stats", methods=["GET"], endpoint="report_stats")
    @api_errors
    def report_stats():
        start, end = _range()
        stats = container.report_service.get_attendance_stats(require_arg("classId"), start, end)
        return jsonify({"success": True, "start": start, "end": end, "stats": stats.to_dict()})

    @app.route("/api/reports/daily", methods=["GET"], endpoint="report_daily")
    @api_errors
    def report_daily():
        report = container.report_service.daily_report(
            require_arg("classId"),
            require_arg("date"),
            division=arg("division"),
        )
        return jsonify(
            {
                "success": True,
                "date": report.date,
                "dayName": day_name(report.date),
                "formattedDate": formatted_date(report.date),
                "present": [s.to_dict() for s in report.present],
                "absent": [s.to_dict() for s in report.absent],
                "summary": {"present": len(report.present), "absent": len(report.absent)},
            }
        )

    @app.route("/api/reports/period", methods=["GET"], endpoint="report_period")
    @api_errors
    def report_period():
        start, end = _range()
        report = container.report_service.period_report(require_arg("classId"), start, end, division=arg("division"))
        return jsonify(
            {
                "success": True,
                "start": report.start,
                "end": report.end,
                "totalDays": report.total_days,
                "students": [r.to_dict() for r in report.rows],
                "summary": {"present": report.total_present, "absent": report.total_absent},
            }
        )

    @app.route("/api/reports/export.csv", methods=["GET"], endpoint="report_export_csv")
    @api_errors
    def report_export_csv():
        export = container.report_service.export_attendance_csv(
            arg("start"),
            arg("end"),
            class_id=arg("classId"),
            division=arg("division"),
        )
        return csv_response(app, content=export.content, filename=export.filename)

    @app.route("/api/reports/date.csv", methods=["GET"], endpoint="report_date_csv")
    @api_errors
    def report_date_csv():
        export = container.report_service.export_date_csv(
            require_arg("classId"),
            require_arg("date"),
            view=parse_status(arg("view") or "present"),
            division=arg("division"),
            sort_field=arg("sort") or "name",
            descending=(arg("direction") or "asc").lower() == "desc",
        )
        return csv_response(app, content=export.content, filename=export.filename)
