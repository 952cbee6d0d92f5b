from __future__ import annotations

from datetime import date, time
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import LectureSession
from .repository import LectureRepository


class MySQLLectureRepository(LectureRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, lecture_id: int) -> Optional[LectureSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT lecture_id, subject_id, teacher_id, lecture_date, start_time, end_time,
                       cohort_label, room
                FROM lectures
                WHERE lecture_id=%s
                """,
                (int(lecture_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LectureSession(
                lecture_id=int(r["lecture_id"]),
                subject_id=int(r["subject_id"]),
                teacher_id=int(r["teacher_id"]),
                lecture_date=r["lecture_date"],
                start_time=normalize_mysql_time(r["start_time"]),
                end_time=normalize_mysql_time(r["end_time"]),
                cohort_label=r["cohort_label"],
                room=r.get("room"),
            )

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO lectures(subject_id, teacher_id, lecture_date, start_time, end_time, cohort_label, room)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(subject_id), int(teacher_id), lecture_date, start_time, end_time, cohort_label, room),
            )
            return int(cur.lastrowid)
