from __future__ import annotations

from enum import Enum

from .enums import Role


class Permission(str, Enum):
    MARK_ATTENDANCE = "mark_attendance"
    UPDATE_ATTENDANCE = "update_attendance"
    VIEW_LECTURE_ATTENDANCE = "view_lecture_attendance"
    VIEW_STUDENT_ATTENDANCE = "view_student_attendance"
    VIEW_STUDENT_SUMMARY = "view_student_summary"
    SCHEDULE_LECTURE = "schedule_lecture"


# Single source of truth for role -> permission; the request gate reads only this table.
ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.TEACHER: frozenset(
        {
            Permission.MARK_ATTENDANCE,
            Permission.UPDATE_ATTENDANCE,
            Permission.VIEW_LECTURE_ATTENDANCE,
            Permission.SCHEDULE_LECTURE,
        }
    ),
    Role.STUDENT: frozenset(
        {
            Permission.VIEW_STUDENT_ATTENDANCE,
            Permission.VIEW_STUDENT_SUMMARY,
        }
    ),
}

# Permissions a STUDENT may only exercise on their own student id.
SELF_SCOPED: dict[Role, frozenset[Permission]] = {
    Role.STUDENT: frozenset(
        {
            Permission.VIEW_STUDENT_ATTENDANCE,
            Permission.VIEW_STUDENT_SUMMARY,
        }
    ),
}


def has_permission(role: Role, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def is_self_scoped(role: Role, permission: Permission) -> bool:
    return permission in SELF_SCOPED.get(role, frozenset())
