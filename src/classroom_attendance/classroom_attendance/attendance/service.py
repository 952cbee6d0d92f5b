from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_date_range
from ..core.enums import AttendanceStatus
from ..core.exceptions import InvalidOperationError, NotFoundError
from ..references.resolver import ReferenceResolver
from .model import AttendanceEntry, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases over the attendance ledger: bulk marking, corrections and listings.

    Bulk marking is all-or-nothing: every referenced entity is resolved before the
    first write, and the batch is written in one transaction.
    """

    def __init__(self, attendance: AttendanceRepository, resolver: ReferenceResolver):
        self._attendance = attendance
        self._resolver = resolver

    def mark_bulk(
        self,
        lecture_id: int,
        entries: Sequence[AttendanceEntry],
        acting_teacher_id: int,
        *,
        now: datetime | None = None,
    ) -> list[AttendanceRecord]:
        now = (now or now_local()).replace(microsecond=0)
        today = now.date()

        lecture = self._resolver.resolve_lecture(lecture_id)
        if lecture.lecture_date > today:
            logger.warning("Rejected marking for future lecture %s dated %s", lecture.lecture_id, lecture.lecture_date)
            raise InvalidOperationError("Cannot mark attendance for a future lecture.")

        teacher = self._resolver.resolve_teacher(acting_teacher_id)

        for entry in entries:
            self._resolver.resolve_student(entry.student_id)

        if not entries:
            return []

        records = self._attendance.upsert_many(
            lecture_id=lecture.lecture_id,
            entries=list(entries),
            marked_by_teacher_id=teacher.teacher_id,
            marked_at=now,
        )
        logger.info(
            "Teacher %s marked %d student(s) for lecture %s",
            teacher.teacher_id, len(records), lecture.lecture_id,
        )
        return list(records)

    def update_single(
        self,
        record_id: int,
        new_status: AttendanceStatus,
        acting_teacher_id: int,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = (now or now_local()).replace(microsecond=0)

        existing = self._attendance.get_by_id(int(record_id))
        if not existing:
            raise NotFoundError(f"Attendance record not found with ID: {record_id}")

        teacher = self._resolver.resolve_teacher(acting_teacher_id)

        updated = self._attendance.update_status(
            record_id=existing.record_id,
            status=new_status,
            marked_by_teacher_id=teacher.teacher_id,
            marked_at=now,
        )
        if not updated:
            # Lecture deleted (cascade) between the read and the write.
            raise NotFoundError(f"Attendance record not found with ID: {record_id}")

        logger.info(
            "Teacher %s changed record %s from %s to %s",
            teacher.teacher_id, existing.record_id, existing.status.value, new_status.value,
        )
        return updated

    def list_by_lecture(self, lecture_id: int) -> list[AttendanceRecord]:
        lecture = self._resolver.resolve_lecture(lecture_id)
        return list(self._attendance.find_by_lecture(lecture.lecture_id))

    def list_by_student(
        self,
        student_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[AttendanceRecord]:
        student = self._resolver.resolve_student(student_id)
        require_date_range(start, end)

        if start is None and end is None:
            records = self._attendance.find_by_student(student.student_id)
        else:
            records = self._attendance.find_by_student_in_date_range(student_id=student.student_id, start=start, end=end)
        return list(records)

    def get_history_rows(
        self,
        student_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[dict]:
        """Student history flattened for export, one row per record with lecture context."""

        records = self.list_by_student(student_id, start=start, end=end)

        subjects: dict[int, str] = {}
        out: list[dict] = []
        for r in records:
            lecture = self._resolver.resolve_lecture(r.lecture_id)
            code = subjects.get(lecture.subject_id)
            if code is None:
                code = self._resolver.resolve_subject(lecture.subject_id).code
                subjects[lecture.subject_id] = code
            out.append(
                {
                    "lecture_date": lecture.lecture_date.strftime("%Y-%m-%d"),
                    "start_time": lecture.start_time.strftime("%H:%M"),
                    "end_time": lecture.end_time.strftime("%H:%M"),
                    "subject_code": code,
                    "lecture_id": r.lecture_id,
                    "status": r.status.value,
                    "marked_by_teacher_id": r.marked_by_teacher_id,
                    "marked_at": r.marked_at.strftime("%Y-%m-%d %H:%M:%S"),
                }
            )
        return out
