from __future__ import annotations

from datetime import timedelta

import pytest

from src.classroom_attendance.classroom_attendance.attendance.model import AttendanceEntry
from src.classroom_attendance.classroom_attendance.core.enums import AttendanceStatus
from src.classroom_attendance.classroom_attendance.core.exceptions import NotFoundError


def _by_code(summary):
    return {s.subject_code: s for s in summary.subjects}


def test_seventy_percent_for_seven_of_ten(services, repos, fixed_now):
    today = fixed_now.date()
    # Ten CS301 lectures up to today (the fixture already holds one today and one tomorrow).
    lectures = [repos.today_lecture] + [
        repos.lectures.add(subject_id=1, lecture_date=today - timedelta(days=d), cohort_label="2022 A")
        for d in range(1, 10)
    ]
    for i, lec in enumerate(lectures):
        status = AttendanceStatus.PRESENT if i < 7 else AttendanceStatus.ABSENT
        services.attendance_service.mark_bulk(lec.lecture_id, [AttendanceEntry(1, status)], 1, now=fixed_now)

    summary = services.report_service.student_summary(1, as_of=today)

    cs301 = _by_code(summary)["CS301"]
    assert cs301.expected == 10
    assert cs301.attended == 7
    assert cs301.percentage == pytest.approx(70.0)


def test_zero_expected_gives_zero_percent(services, fixed_now):
    summary = services.report_service.student_summary(1, as_of=fixed_now.date())

    cs302 = _by_code(summary)["CS302"]
    assert cs302.expected == 0
    assert cs302.attended == 0
    assert cs302.percentage == 0.0


def test_student_without_any_lectures_has_zero_overall(services, fixed_now):
    # Student 3 has no section, so cohort "2022" matches no scheduled lecture.
    summary = services.report_service.student_summary(3, as_of=fixed_now.date())

    assert summary.cohort_label == "2022"
    assert summary.overall_percentage == 0.0
    assert all(s.percentage == 0.0 for s in summary.subjects)


def test_only_department_subjects_are_reported(services, fixed_now):
    summary = services.report_service.student_summary(1, as_of=fixed_now.date())

    assert [s.subject_code for s in summary.subjects] == ["CS301", "CS302"]


def test_overall_percentage_uses_summed_counts(services, repos, fixed_now):
    today = fixed_now.date()
    cs302_a = repos.lectures.add(subject_id=2, lecture_date=today - timedelta(days=1), cohort_label="2022 A")
    cs302_b = repos.lectures.add(subject_id=2, lecture_date=today - timedelta(days=2), cohort_label="2022 A")
    cs302_c = repos.lectures.add(subject_id=2, lecture_date=today - timedelta(days=3), cohort_label="2022 A")

    svc = services.attendance_service
    svc.mark_bulk(repos.today_lecture.lecture_id, [AttendanceEntry(1, AttendanceStatus.PRESENT)], 1, now=fixed_now)
    svc.mark_bulk(cs302_a.lecture_id, [AttendanceEntry(1, AttendanceStatus.PRESENT)], 1, now=fixed_now)
    svc.mark_bulk(cs302_b.lecture_id, [AttendanceEntry(1, AttendanceStatus.LEAVE)], 1, now=fixed_now)
    svc.mark_bulk(cs302_c.lecture_id, [AttendanceEntry(1, AttendanceStatus.ABSENT)], 1, now=fixed_now)

    summary = services.report_service.student_summary(1, as_of=today)

    subjects = _by_code(summary)
    assert subjects["CS301"].percentage == pytest.approx(100.0)
    assert subjects["CS302"].percentage == pytest.approx(100.0 / 3)
    # 2 attended out of 4 expected, not the mean of the subject percentages.
    assert summary.overall_percentage == pytest.approx(50.0)


def test_expected_lectures_stop_at_as_of_date(services, repos, fixed_now):
    today = fixed_now.date()

    today_summary = services.report_service.student_summary(1, as_of=today)
    tomorrow_summary = services.report_service.student_summary(1, as_of=today + timedelta(days=1))

    assert _by_code(today_summary)["CS301"].expected == 1
    assert _by_code(tomorrow_summary)["CS301"].expected == 2


def test_summary_carries_student_identity(services, fixed_now):
    summary = services.report_service.student_summary(1, as_of=fixed_now.date())

    assert summary.student_id == 1
    assert summary.full_name == "Priya Nair"
    assert summary.roll_number == "CS22-001"
    assert summary.dept_name == "Computer Science"
    assert summary.batch_year == 2022
    assert summary.section == "A"
    assert summary.cohort_label == "2022 A"


def test_summary_unknown_student(services):
    with pytest.raises(NotFoundError):
        services.report_service.student_summary(404)
