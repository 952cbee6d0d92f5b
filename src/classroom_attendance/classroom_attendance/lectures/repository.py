from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol

from .model import LectureSession


class LectureRepository(Protocol):
    def get_by_id(self, lecture_id: int) -> Optional[LectureSession]:
        raise NotImplementedError

    def create(
        self,
        *,
        subject_id: int,
        teacher_id: int,
        lecture_date: date,
        start_time: time,
        end_time: time,
        cohort_label: str,
        room: Optional[str] = None,
    ) -> int:
        """Persist a new lecture session.

        Returns lecture_id.
        """

        raise NotImplementedError
