from __future__ import annotations

from flask import Flask, request

from ..auth.gate import require_permission
from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..common.responses import ok
from ..common.validators import require_positive_id
from ..core.exceptions import ValidationError
from ..core.permissions import Permission
from ..container import Container
from .model import LectureSession


def lecture_to_dict(lecture: LectureSession) -> dict:
    return {
        "id": lecture.lecture_id,
        "subject_id": lecture.subject_id,
        "teacher_id": lecture.teacher_id,
        "lecture_date": lecture.lecture_date.strftime("%Y-%m-%d"),
        "start_time": lecture.start_time.strftime("%H:%M"),
        "end_time": lecture.end_time.strftime("%H:%M"),
        "student_group": lecture.cohort_label,
        "room_number": lecture.room,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/v1/lectures", methods=["POST"], endpoint="lecture_schedule")
    @require_permission(Permission.SCHEDULE_LECTURE)
    def lecture_schedule():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")

        try:
            lecture_date = parse_iso_date(str(body.get("lecture_date") or ""))
            start_time = parse_clock_time(str(body.get("start_time") or ""))
            end_time = parse_clock_time(str(body.get("end_time") or ""))
        except ValueError:
            raise ValidationError("lecture_date must be YYYY-MM-DD and times HH:MM")

        lecture = container.lecture_service.schedule(
            subject_id=require_positive_id(body.get("subject_id"), "subject_id"),
            teacher_id=require_positive_id(body.get("teacher_id"), "teacher_id"),
            lecture_date=lecture_date,
            start_time=start_time,
            end_time=end_time,
            cohort_label=str(body.get("student_group") or body.get("cohort_label") or ""),
            room=str(body.get("room_number") or body.get("room") or "") or None,
        )
        return ok(lecture_to_dict(lecture), "Lecture scheduled", 201)

    @app.route("/api/v1/lectures/<int:lecture_id>", methods=["GET"], endpoint="lecture_detail")
    @require_permission(Permission.VIEW_LECTURE_ATTENDANCE)
    def lecture_detail(lecture_id: int):
        return ok(lecture_to_dict(container.lecture_service.get(lecture_id)))
