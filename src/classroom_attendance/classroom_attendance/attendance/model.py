from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status for one lecture.

    At most one record exists per (lecture_id, student_id). Lecture, student and
    teacher are referenced by id only.
    """

    record_id: int
    lecture_id: int
    student_id: int
    status: AttendanceStatus
    marked_by_teacher_id: int
    marked_at: datetime


@dataclass(frozen=True)
class AttendanceEntry:
    """One (student, status) pair of a bulk marking request."""

    student_id: int
    status: AttendanceStatus
