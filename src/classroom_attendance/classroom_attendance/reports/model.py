from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SubjectAttendanceSummary:
    subject_id: int
    subject_code: str
    subject_name: str
    expected: int
    attended: int
    percentage: float


@dataclass(frozen=True)
class StudentAttendanceSummary:
    """Read-model: per-subject and overall attendance of one student."""

    student_id: int
    full_name: str
    roll_number: str
    dept_name: Optional[str]
    batch_year: int
    section: Optional[str]
    cohort_label: str
    overall_percentage: float
    subjects: list[SubjectAttendanceSummary] = field(default_factory=list)
