from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional

from ..common.validators import require_non_empty
from ..core.exceptions import InvalidOperationError
from ..references.resolver import ReferenceResolver
from .model import LectureSession
from .repository import LectureRepository

logger = logging.getLogger(__name__)


class LectureService:
    """Use case: schedule lecture sessions and look them up."""

    def __init__(self, lectures: LectureRepository, resolver: ReferenceResolver):
        self._lectures = lectures
        self._resolver = resolver

    def schedule(
        self,
        *,
        subject_id: int,
        teacher_id: int,
        lecture_date: date,
        start_time: time,
        end_time: time,
        cohort_label: str,
        room: Optional[str] = None,
    ) -> LectureSession:
        cohort_label = require_non_empty(cohort_label, "cohort_label")
        if end_time <= start_time:
            raise InvalidOperationError("Lecture end time must be after start time.")

        subject = self._resolver.resolve_subject(subject_id)
        teacher = self._resolver.resolve_teacher(teacher_id)

        room = room.strip() if room and room.strip() else None
        lecture_id = self._lectures.create(
            subject_id=subject.subject_id,
            teacher_id=teacher.teacher_id,
            lecture_date=lecture_date,
            start_time=start_time,
            end_time=end_time,
            cohort_label=cohort_label,
            room=room,
        )
        logger.info(
            "Scheduled lecture %s: subject=%s cohort=%r on %s %s-%s",
            lecture_id, subject.code, cohort_label, lecture_date, start_time, end_time,
        )
        return self._resolver.resolve_lecture(lecture_id)

    def get(self, lecture_id: int) -> LectureSession:
        return self._resolver.resolve_lecture(lecture_id)
