from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEntry, AttendanceRecord


class AttendanceRepository(Protocol):
    """Attendance ledger contract.

    Implementations must enforce the (lecture_id, student_id) uniqueness in storage and
    expose insert-or-update by that natural key as one atomic step.
    """

    def upsert(
        self,
        *,
        lecture_id: int,
        student_id: int,
        status: AttendanceStatus,
        marked_by_teacher_id: int,
        marked_at: datetime,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def upsert_many(
        self,
        *,
        lecture_id: int,
        entries: Sequence[AttendanceEntry],
        marked_by_teacher_id: int,
        marked_at: datetime,
    ) -> Sequence[AttendanceRecord]:
        """Upsert a whole batch in one transaction.

        Returns the records in input order; either every entry is written or none is.
        """

        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def update_status(
        self,
        *,
        record_id: int,
        status: AttendanceStatus,
        marked_by_teacher_id: int,
        marked_at: datetime,
    ) -> Optional[AttendanceRecord]:
        """Overwrite status/actor/timestamp; None when the record does not exist."""

        raise NotImplementedError

    def find_by_lecture_and_student(self, *, lecture_id: int, student_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_by_lecture(self, lecture_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def find_by_student_in_date_range(self, *, student_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        """Both bounds inclusive, compared against the lecture date."""

        raise NotImplementedError

    def count_present(self, *, student_id: int, subject_id: int) -> int:
        raise NotImplementedError

    def count_expected_lectures(self, *, subject_id: int, cohort_label: str, up_to: date) -> int:
        """Lectures of the subject scheduled for the cohort with lecture_date <= up_to."""

        raise NotImplementedError
