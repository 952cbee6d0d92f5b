from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller role resolved by the login flow before a request reaches us."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class AttendanceStatus(str, Enum):
    """Stored status of one student for one lecture."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LEAVE = "LEAVE"
