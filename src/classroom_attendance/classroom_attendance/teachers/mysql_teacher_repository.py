from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Teacher
from .repository import TeacherRepository


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT teacher_id, full_name, employee_id, dept_id
                FROM teachers
                WHERE teacher_id=%s
                """,
                (int(teacher_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Teacher(
                teacher_id=int(r["teacher_id"]),
                full_name=r["full_name"],
                employee_id=r["employee_id"],
                dept_id=int(r["dept_id"]),
            )
