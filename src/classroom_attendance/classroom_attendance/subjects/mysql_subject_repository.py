from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Subject
from .repository import SubjectRepository


def _row_to_subject(r: dict) -> Subject:
    return Subject(
        subject_id=int(r["subject_id"]),
        code=r["code"],
        name=r["name"],
        dept_id=int(r["dept_id"]),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT subject_id, code, name, dept_id FROM subjects WHERE subject_id=%s",
                (int(subject_id),),
            )
            r = fetchone(cur)
            return _row_to_subject(r) if r else None

    def list_by_department(self, dept_id: int) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT subject_id, code, name, dept_id FROM subjects WHERE dept_id=%s ORDER BY code",
                (int(dept_id),),
            )
            return [_row_to_subject(r) for r in fetchall(cur)]
