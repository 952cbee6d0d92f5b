from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..references.resolver import ReferenceResolver
from .calculator import attendance_percentage
from .model import StudentAttendanceSummary, SubjectAttendanceSummary

logger = logging.getLogger(__name__)


class AttendanceReportService:
    """Per-subject and overall attendance percentages for a student.

    Relevant subjects are all subjects of the student's department, and the expected
    lecture count is the number of lectures scheduled for the student's cohort label.
    Both are approximations of a real enrollment relationship.
    """

    def __init__(self, attendance: AttendanceRepository, resolver: ReferenceResolver):
        self._attendance = attendance
        self._resolver = resolver

    def student_summary(self, student_id: int, *, as_of: Optional[date] = None) -> StudentAttendanceSummary:
        as_of = as_of or now_local().date()

        student = self._resolver.resolve_student(student_id)
        cohort = student.cohort_label

        subjects = self._resolver.list_subjects_by_department(student.dept_id)

        rows: list[SubjectAttendanceSummary] = []
        total_attended = 0
        total_expected = 0
        for subject in subjects:
            attended = self._attendance.count_present(student_id=student.student_id, subject_id=subject.subject_id)
            expected = self._attendance.count_expected_lectures(
                subject_id=subject.subject_id,
                cohort_label=cohort,
                up_to=as_of,
            )
            rows.append(
                SubjectAttendanceSummary(
                    subject_id=subject.subject_id,
                    subject_code=subject.code,
                    subject_name=subject.name,
                    expected=expected,
                    attended=attended,
                    percentage=attendance_percentage(attended, expected),
                )
            )
            total_attended += attended
            total_expected += expected

        logger.debug(
            "Summary for student %s (cohort %r, as of %s): %d/%d over %d subject(s)",
            student.student_id, cohort, as_of, total_attended, total_expected, len(rows),
        )

        return StudentAttendanceSummary(
            student_id=student.student_id,
            full_name=student.full_name,
            roll_number=student.roll_number,
            dept_name=student.dept_name,
            batch_year=student.batch_year,
            section=student.section,
            cohort_label=cohort,
            overall_percentage=attendance_percentage(total_attended, total_expected),
            subjects=rows,
        )
