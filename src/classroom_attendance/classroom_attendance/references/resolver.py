from __future__ import annotations

from typing import Sequence

from ..core.exceptions import NotFoundError
from ..lectures.model import LectureSession
from ..lectures.repository import LectureRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from ..teachers.model import Teacher
from ..teachers.repository import TeacherRepository


class ReferenceResolver:
    """Resolve reference ids into entities, raising NotFoundError when missing.

    Repositories answer with Optional values; callers of the resolver always get an
    entity back or an error, never None.
    """

    def __init__(
        self,
        lectures: LectureRepository,
        students: StudentRepository,
        teachers: TeacherRepository,
        subjects: SubjectRepository,
    ):
        self._lectures = lectures
        self._students = students
        self._teachers = teachers
        self._subjects = subjects

    def resolve_lecture(self, lecture_id: int) -> LectureSession:
        lecture = self._lectures.get_by_id(int(lecture_id))
        if not lecture:
            raise NotFoundError(f"Lecture not found with ID: {lecture_id}")
        return lecture

    def resolve_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError(f"Student not found with ID: {student_id}")
        return student

    def resolve_teacher(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(int(teacher_id))
        if not teacher:
            raise NotFoundError(f"Teacher not found with ID: {teacher_id}")
        return teacher

    def resolve_subject(self, subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(int(subject_id))
        if not subject:
            raise NotFoundError(f"Subject not found with ID: {subject_id}")
        return subject

    def list_subjects_by_department(self, dept_id: int) -> Sequence[Subject]:
        return list(self._subjects.list_by_department(int(dept_id)))
