from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from types import SimpleNamespace
from typing import Optional, Sequence

import pytest

from src.classroom_attendance.classroom_attendance.attendance.model import AttendanceEntry, AttendanceRecord
from src.classroom_attendance.classroom_attendance.container import build_services
from src.classroom_attendance.classroom_attendance.core.enums import AttendanceStatus
from src.classroom_attendance.classroom_attendance.lectures.model import LectureSession
from src.classroom_attendance.classroom_attendance.students.model import Student
from src.classroom_attendance.classroom_attendance.subjects.model import Subject
from src.classroom_attendance.classroom_attendance.teachers.model import Teacher


@dataclass
class InMemoryLectures:
    lectures: dict[int, LectureSession] = field(default_factory=dict)

    def get_by_id(self, lecture_id: int) -> Optional[LectureSession]:
        return self.lectures.get(int(lecture_id))

    def create(self, *, subject_id, teacher_id, lecture_date, start_time, end_time, cohort_label, room=None) -> int:
        lecture_id = max(self.lectures, default=0) + 1
        self.lectures[lecture_id] = LectureSession(
            lecture_id=lecture_id,
            subject_id=int(subject_id),
            teacher_id=int(teacher_id),
            lecture_date=lecture_date,
            start_time=start_time,
            end_time=end_time,
            cohort_label=cohort_label,
            room=room,
        )
        return lecture_id

    def add(self, *, subject_id: int, lecture_date: date, cohort_label: str, teacher_id: int = 1) -> LectureSession:
        lecture_id = self.create(
            subject_id=subject_id,
            teacher_id=teacher_id,
            lecture_date=lecture_date,
            start_time=time(9, 0),
            end_time=time(10, 0),
            cohort_label=cohort_label,
        )
        return self.lectures[lecture_id]


@dataclass
class InMemoryStudents:
    students: dict[int, Student] = field(default_factory=dict)

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.students.get(int(student_id))


@dataclass
class InMemoryTeachers:
    teachers: dict[int, Teacher] = field(default_factory=dict)

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        return self.teachers.get(int(teacher_id))


@dataclass
class InMemorySubjects:
    subjects: dict[int, Subject] = field(default_factory=dict)

    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        return self.subjects.get(int(subject_id))

    def list_by_department(self, dept_id: int) -> Sequence[Subject]:
        return sorted((s for s in self.subjects.values() if s.dept_id == int(dept_id)), key=lambda s: s.code)


class InMemoryAttendance:
    """Ledger fake keyed by (lecture_id, student_id), mirroring the unique index."""

    def __init__(self, lectures: InMemoryLectures):
        self._lectures = lectures
        self._lock = threading.Lock()
        self._by_key: dict[tuple[int, int], AttendanceRecord] = {}
        self._id = 0
        self.writes = 0

    def _upsert_into(self, store, *, lecture_id, student_id, status, marked_by_teacher_id, marked_at) -> AttendanceRecord:
        key = (int(lecture_id), int(student_id))
        existing = store.get(key)
        if existing:
            rec = replace(existing, status=status, marked_by_teacher_id=marked_by_teacher_id, marked_at=marked_at)
        else:
            self._id += 1
            rec = AttendanceRecord(
                record_id=self._id,
                lecture_id=key[0],
                student_id=key[1],
                status=status,
                marked_by_teacher_id=marked_by_teacher_id,
                marked_at=marked_at,
            )
        store[key] = rec
        return rec

    def upsert(self, *, lecture_id, student_id, status, marked_by_teacher_id, marked_at) -> AttendanceRecord:
        with self._lock:
            self.writes += 1
            return self._upsert_into(
                self._by_key,
                lecture_id=lecture_id,
                student_id=student_id,
                status=status,
                marked_by_teacher_id=marked_by_teacher_id,
                marked_at=marked_at,
            )

    def upsert_many(self, *, lecture_id, entries: Sequence[AttendanceEntry], marked_by_teacher_id, marked_at):
        with self._lock:
            self.writes += 1
            staged = dict(self._by_key)
            out = [
                self._upsert_into(
                    staged,
                    lecture_id=lecture_id,
                    student_id=e.student_id,
                    status=e.status,
                    marked_by_teacher_id=marked_by_teacher_id,
                    marked_at=marked_at,
                )
                for e in entries
            ]
            self._by_key = staged
            return out

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        return next((r for r in self._by_key.values() if r.record_id == int(record_id)), None)

    def update_status(self, *, record_id, status, marked_by_teacher_id, marked_at) -> Optional[AttendanceRecord]:
        with self._lock:
            for key, rec in self._by_key.items():
                if rec.record_id == int(record_id):
                    self.writes += 1
                    updated = replace(rec, status=status, marked_by_teacher_id=marked_by_teacher_id, marked_at=marked_at)
                    self._by_key[key] = updated
                    return updated
            return None

    def find_by_lecture_and_student(self, *, lecture_id: int, student_id: int) -> Optional[AttendanceRecord]:
        return self._by_key.get((int(lecture_id), int(student_id)))

    def find_by_lecture(self, lecture_id: int):
        return sorted((r for r in self._by_key.values() if r.lecture_id == int(lecture_id)), key=lambda r: r.student_id)

    def find_by_student(self, student_id: int):
        items = [r for r in self._by_key.values() if r.student_id == int(student_id)]
        items.sort(key=lambda r: self._lectures.get_by_id(r.lecture_id).lecture_date)
        return items

    def find_by_student_in_date_range(self, *, student_id: int, start: date, end: date):
        return [
            r for r in self.find_by_student(student_id)
            if start <= self._lectures.get_by_id(r.lecture_id).lecture_date <= end
        ]

    def count_present(self, *, student_id: int, subject_id: int) -> int:
        return sum(
            1
            for r in self._by_key.values()
            if r.student_id == int(student_id)
            and r.status == AttendanceStatus.PRESENT
            and self._lectures.get_by_id(r.lecture_id).subject_id == int(subject_id)
        )

    def count_expected_lectures(self, *, subject_id: int, cohort_label: str, up_to: date) -> int:
        return sum(
            1
            for lec in self._lectures.lectures.values()
            if lec.subject_id == int(subject_id) and lec.cohort_label == cohort_label and lec.lecture_date <= up_to
        )

    def all_records(self) -> list[AttendanceRecord]:
        return list(self._by_key.values())


@pytest.fixture
def repos(fixed_now: datetime):
    """CS301/CS302 in department 1, ME201 in department 2; one CS301 lecture today and one tomorrow."""

    today = fixed_now.date()

    lectures = InMemoryLectures()
    students = InMemoryStudents(
        {
            1: Student(student_id=1, full_name="Priya Nair", roll_number="CS22-001", dept_id=1, batch_year=2022, section="A", dept_name="Computer Science"),
            2: Student(student_id=2, full_name="Rahul Verma", roll_number="CS22-002", dept_id=1, batch_year=2022, section="A", dept_name="Computer Science"),
            3: Student(student_id=3, full_name="Meera Iyer", roll_number="CS22-031", dept_id=1, batch_year=2022, section=None, dept_name="Computer Science"),
        }
    )
    teachers = InMemoryTeachers(
        {
            1: Teacher(teacher_id=1, full_name="Anita Rao", employee_id="EMP-1001", dept_id=1),
            2: Teacher(teacher_id=2, full_name="Vikram Shah", employee_id="EMP-1002", dept_id=1),
        }
    )
    subjects = InMemorySubjects(
        {
            1: Subject(subject_id=1, code="CS301", name="Operating Systems", dept_id=1),
            2: Subject(subject_id=2, code="CS302", name="Database Systems", dept_id=1),
            3: Subject(subject_id=3, code="ME201", name="Thermodynamics", dept_id=2),
        }
    )
    attendance = InMemoryAttendance(lectures)

    today_lecture = lectures.add(subject_id=1, lecture_date=today, cohort_label="2022 A")
    tomorrow_lecture = lectures.add(subject_id=1, lecture_date=today + timedelta(days=1), cohort_label="2022 A")

    return SimpleNamespace(
        lectures=lectures,
        students=students,
        teachers=teachers,
        subjects=subjects,
        attendance=attendance,
        today_lecture=today_lecture,
        tomorrow_lecture=tomorrow_lecture,
    )


@pytest.fixture
def services(repos):
    return build_services(
        lectures_repo=repos.lectures,
        students_repo=repos.students,
        teachers_repo=repos.teachers,
        subjects_repo=repos.subjects,
        attendance_repo=repos.attendance,
    )
