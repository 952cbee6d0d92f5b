from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_STORAGE_RETRIES
from .database.connection import DBConfig, DatabaseConnection
from .lectures.mysql_lecture_repository import MySQLLectureRepository
from .lectures.service import LectureService
from .references.resolver import ReferenceResolver
from .reports.service import AttendanceReportService
from .students.mysql_student_repository import MySQLStudentRepository
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .teachers.mysql_teacher_repository import MySQLTeacherRepository


@dataclass(frozen=True)
class Container:
    resolver: ReferenceResolver
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    lecture_service: LectureService


def build_services(*, lectures_repo, students_repo, teachers_repo, subjects_repo, attendance_repo) -> Container:
    """Wire services over any set of repositories (MySQL in the app, in-memory in tests)."""

    resolver = ReferenceResolver(lectures_repo, students_repo, teachers_repo, subjects_repo)
    return Container(
        resolver=resolver,
        attendance_service=AttendanceService(attendance_repo, resolver),
        report_service=AttendanceReportService(attendance_repo, resolver),
        lecture_service=LectureService(lectures_repo, resolver),
    )


def build_container(*, db_config: dict, storage_retries: int = DEFAULT_STORAGE_RETRIES) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return build_services(
        lectures_repo=MySQLLectureRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        teachers_repo=MySQLTeacherRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn, retries=storage_retries),
    )
