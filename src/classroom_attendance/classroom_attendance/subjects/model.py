from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Subject:
    """Domain entity: a subject offered by a department.

    Attendance percentages are grouped per subject.
    """

    subject_id: int
    code: str
    name: str
    dept_id: int
