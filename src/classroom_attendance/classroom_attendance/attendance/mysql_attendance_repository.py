from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.constants import DEFAULT_STORAGE_RETRIES
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, run_with_retries
from .model import AttendanceEntry, AttendanceRecord
from .repository import AttendanceRepository

_RECORD_COLUMNS = "ar.record_id, ar.lecture_id, ar.student_id, ar.status, ar.marked_by_teacher_id, ar.marked_at"

# Atomic insert-or-update against UNIQUE KEY uq_attendance_lecture_student(lecture_id, student_id).
_UPSERT_SQL = """
    INSERT INTO attendance_records(lecture_id, student_id, status, marked_by_teacher_id, marked_at)
    VALUES(%s,%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE
        status=VALUES(status),
        marked_by_teacher_id=VALUES(marked_by_teacher_id),
        marked_at=VALUES(marked_at)
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        lecture_id=int(r["lecture_id"]),
        student_id=int(r["student_id"]),
        status=AttendanceStatus(r["status"]),
        marked_by_teacher_id=int(r["marked_by_teacher_id"]),
        marked_at=r["marked_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, retries: int = DEFAULT_STORAGE_RETRIES):
        self._conn_factory = conn_factory
        self._retries = int(retries)

    @staticmethod
    def _upsert_in(cur, *, lecture_id: int, student_id: int, status: AttendanceStatus, marked_by_teacher_id: int, marked_at: datetime) -> AttendanceRecord:
        cur.execute(_UPSERT_SQL, (int(lecture_id), int(student_id), status.value, int(marked_by_teacher_id), marked_at))
        cur.execute(
            f"""
            SELECT {_RECORD_COLUMNS}
            FROM attendance_records ar
            WHERE ar.lecture_id=%s AND ar.student_id=%s
            """,
            (int(lecture_id), int(student_id)),
        )
        return _row_to_record(fetchone(cur))

    def upsert(
        self,
        *,
        lecture_id: int,
        student_id: int,
        status: AttendanceStatus,
        marked_by_teacher_id: int,
        marked_at: datetime,
    ) -> AttendanceRecord:
        def _op() -> AttendanceRecord:
            with db_cursor(self._conn_factory) as (_, cur):
                return self._upsert_in(
                    cur,
                    lecture_id=lecture_id,
                    student_id=student_id,
                    status=status,
                    marked_by_teacher_id=marked_by_teacher_id,
                    marked_at=marked_at,
                )

        return run_with_retries(_op, retries=self._retries, label="attendance upsert")

    def upsert_many(
        self,
        *,
        lecture_id: int,
        entries: Sequence[AttendanceEntry],
        marked_by_teacher_id: int,
        marked_at: datetime,
    ) -> Sequence[AttendanceRecord]:
        def _op() -> list[AttendanceRecord]:
            with db_cursor(self._conn_factory) as (_, cur):
                return [
                    self._upsert_in(
                        cur,
                        lecture_id=lecture_id,
                        student_id=e.student_id,
                        status=e.status,
                        marked_by_teacher_id=marked_by_teacher_id,
                        marked_at=marked_at,
                    )
                    for e in entries
                ]

        return run_with_retries(_op, retries=self._retries, label="attendance bulk upsert")

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.record_id=%s",
                (int(record_id),),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def update_status(
        self,
        *,
        record_id: int,
        status: AttendanceStatus,
        marked_by_teacher_id: int,
        marked_at: datetime,
    ) -> Optional[AttendanceRecord]:
        def _op() -> Optional[AttendanceRecord]:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE attendance_records
                    SET status=%s, marked_by_teacher_id=%s, marked_at=%s
                    WHERE record_id=%s
                    """,
                    (status.value, int(marked_by_teacher_id), marked_at, int(record_id)),
                )
                cur.execute(
                    f"SELECT {_RECORD_COLUMNS} FROM attendance_records ar WHERE ar.record_id=%s",
                    (int(record_id),),
                )
                r = fetchone(cur)
                return _row_to_record(r) if r else None

        return run_with_retries(_op, retries=self._retries, label="attendance update")

    def find_by_lecture_and_student(self, *, lecture_id: int, student_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.lecture_id=%s AND ar.student_id=%s
                """,
                (int(lecture_id), int(student_id)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_by_lecture(self, lecture_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                WHERE ar.lecture_id=%s
                ORDER BY ar.student_id ASC
                """,
                (int(lecture_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def find_by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                JOIN lectures l ON l.lecture_id = ar.lecture_id
                WHERE ar.student_id=%s
                ORDER BY l.lecture_date ASC, l.start_time ASC
                """,
                (int(student_id),),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def find_by_student_in_date_range(self, *, student_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records ar
                JOIN lectures l ON l.lecture_id = ar.lecture_id
                WHERE ar.student_id=%s AND l.lecture_date BETWEEN %s AND %s
                ORDER BY l.lecture_date ASC, l.start_time ASC
                """,
                (int(student_id), start, end),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_present(self, *, student_id: int, subject_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance_records ar
                JOIN lectures l ON l.lecture_id = ar.lecture_id
                WHERE ar.student_id=%s AND l.subject_id=%s AND ar.status=%s
                """,
                (int(student_id), int(subject_id), AttendanceStatus.PRESENT.value),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_expected_lectures(self, *, subject_id: int, cohort_label: str, up_to: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM lectures l
                WHERE l.subject_id=%s AND l.cohort_label=%s AND l.lecture_date <= %s
                """,
                (int(subject_id), cohort_label, up_to),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
