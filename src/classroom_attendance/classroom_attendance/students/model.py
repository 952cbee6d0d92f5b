from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def cohort_label_for(batch_year: int, section: Optional[str]) -> str:
    """Group label lectures are scheduled for, e.g. "2022 A" or "2022"."""

    if section and section.strip():
        return f"{batch_year} {section.strip()}"
    return str(batch_year)


@dataclass(frozen=True)
class Student:
    """Domain entity: a student.

    Note: `dept_name` is a convenience column joined in by the repository; the
    student still only references the department by id.
    """

    student_id: int
    full_name: str
    roll_number: str
    dept_id: int
    batch_year: int
    section: Optional[str] = None
    dept_name: Optional[str] = None

    @property
    def cohort_label(self) -> str:
        return cohort_label_for(self.batch_year, self.section)
