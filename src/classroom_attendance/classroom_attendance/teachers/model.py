from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher; the actor recorded on attendance marks."""

    teacher_id: int
    full_name: str
    employee_id: str
    dept_id: int
