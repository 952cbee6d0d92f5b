from __future__ import annotations

import csv
import io
from dataclasses import asdict

from flask import Flask, g, request

from ..auth.gate import acting_teacher_id, ensure_student_access, require_permission
from ..common.datetime_utils import parse_optional_date
from ..common.responses import ok
from ..common.validators import require_positive_id, require_status
from ..core.constants import DEFAULT_EXPORT_FILENAME
from ..core.exceptions import ValidationError
from ..core.permissions import Permission
from ..container import Container
from .model import AttendanceEntry, AttendanceRecord

HISTORY_CSV_FIELDS = [
    "lecture_date",
    "start_time",
    "end_time",
    "subject_code",
    "lecture_id",
    "status",
    "marked_by_teacher_id",
    "marked_at",
]


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "lecture_id": r.lecture_id,
        "student_id": r.student_id,
        "status": r.status.value,
        "marked_by_teacher_id": r.marked_by_teacher_id,
        "marking_timestamp": r.marked_at.isoformat(),
    }


def register(app: Flask, container: Container) -> None:
    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _parse_entries(raw) -> list[AttendanceEntry]:
        if not isinstance(raw, list) or not raw:
            raise ValidationError("At least one attendance record is required")
        entries: list[AttendanceEntry] = []
        for item in raw:
            if not isinstance(item, dict):
                raise ValidationError("Each attendance record must be an object")
            entries.append(
                AttendanceEntry(
                    student_id=require_positive_id(item.get("student_id"), "student_id"),
                    status=require_status(item.get("status")),
                )
            )
        return entries

    def _date_range():
        try:
            start = parse_optional_date(request.args.get("start") or request.args.get("startDate"))
            end = parse_optional_date(request.args.get("end") or request.args.get("endDate"))
        except ValueError:
            raise ValidationError("Dates must use the YYYY-MM-DD format")
        return start, end

    @app.route("/api/v1/attendance/mark", methods=["POST"], endpoint="attendance_mark")
    @require_permission(Permission.MARK_ATTENDANCE)
    def attendance_mark():
        body = _json_body()
        lecture_id = require_positive_id(body.get("lecture_id"), "lecture_id")
        entries = _parse_entries(body.get("attendance_records"))
        teacher_id = acting_teacher_id(g.identity, body.get("teacher_id"))

        records = container.attendance_service.mark_bulk(lecture_id, entries, teacher_id)
        return ok([record_to_dict(r) for r in records], "Attendance marked")

    @app.route("/api/v1/attendance/<int:record_id>", methods=["PUT"], endpoint="attendance_update")
    @require_permission(Permission.UPDATE_ATTENDANCE)
    def attendance_update(record_id: int):
        body = request.get_json(silent=True)
        if body is None:
            body = {}
        elif not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        raw_status = request.args.get("updated_status") or request.args.get("status") or body.get("status")
        status = require_status(raw_status)
        teacher_id = acting_teacher_id(g.identity, body.get("teacher_id") or request.args.get("teacher_id"))

        record = container.attendance_service.update_single(record_id, status, teacher_id)
        return ok(record_to_dict(record), "Attendance updated")

    @app.route("/api/v1/attendance/lecture/<int:lecture_id>", methods=["GET"], endpoint="attendance_by_lecture")
    @require_permission(Permission.VIEW_LECTURE_ATTENDANCE)
    def attendance_by_lecture(lecture_id: int):
        records = container.attendance_service.list_by_lecture(lecture_id)
        return ok([record_to_dict(r) for r in records])

    @app.route("/api/v1/attendance/student/<int:student_id>", methods=["GET"], endpoint="attendance_by_student")
    @require_permission(Permission.VIEW_STUDENT_ATTENDANCE)
    def attendance_by_student(student_id: int):
        ensure_student_access(g.identity, g.permission, student_id)
        start, end = _date_range()
        records = container.attendance_service.list_by_student(student_id, start=start, end=end)
        return ok([record_to_dict(r) for r in records])

    @app.route("/api/v1/attendance/student/<int:student_id>/summary", methods=["GET"], endpoint="attendance_summary")
    @require_permission(Permission.VIEW_STUDENT_SUMMARY)
    def attendance_summary(student_id: int):
        ensure_student_access(g.identity, g.permission, student_id)
        summary = container.report_service.student_summary(student_id)
        return ok(asdict(summary))

    @app.route("/api/v1/attendance/student/<int:student_id>/export", methods=["GET"], endpoint="attendance_export")
    @require_permission(Permission.VIEW_STUDENT_ATTENDANCE)
    def attendance_export(student_id: int):
        ensure_student_access(g.identity, g.permission, student_id)
        start, end = _date_range()
        rows = container.attendance_service.get_history_rows(student_id, start=start, end=end)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=HISTORY_CSV_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        filename = f"student_{student_id}_{DEFAULT_EXPORT_FILENAME}"
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
