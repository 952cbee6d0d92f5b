from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional


@dataclass(frozen=True)
class LectureSession:
    """Domain entity: one scheduled occurrence of a subject.

    Invariant: end_time > start_time (checked when the lecture is scheduled).
    """

    lecture_id: int
    subject_id: int
    teacher_id: int
    lecture_date: date
    start_time: time
    end_time: time
    cohort_label: str
    room: Optional[str] = None
