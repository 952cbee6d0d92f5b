from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.student_id, s.full_name, s.roll_number, s.dept_id, s.batch_year, s.section,
                       d.dept_name
                FROM students s
                LEFT JOIN departments d ON d.dept_id = s.dept_id
                WHERE s.student_id=%s
                """,
                (int(student_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Student(
                student_id=int(r["student_id"]),
                full_name=r["full_name"],
                roll_number=r["roll_number"],
                dept_id=int(r["dept_id"]),
                batch_year=int(r["batch_year"]),
                section=r.get("section") or None,
                dept_name=r.get("dept_name"),
            )
