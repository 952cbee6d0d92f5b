from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Any, Optional

from flask import g, session

from ..common.responses import fail
from ..common.validators import require_positive_id
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.permissions import Permission, has_permission, is_self_scoped


@dataclass(frozen=True)
class CallerIdentity:
    """Who is calling, as stored into the Flask session by the login flow.

    For TEACHER callers actor_id is the teacher id, for STUDENT callers the student id.
    """

    actor_id: int
    role: Role


def current_identity() -> Optional[CallerIdentity]:
    if "user_id" not in session or "role" not in session:
        return None
    try:
        return CallerIdentity(actor_id=int(session["user_id"]), role=Role(session["role"]))
    except (TypeError, ValueError):
        return None


def require_permission(permission: Permission):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = current_identity()
            if identity is None:
                return fail("Authentication required", 401)
            if not has_permission(identity.role, permission):
                return fail("You do not have permission for this action", 403)
            g.identity = identity
            g.permission = permission
            return view(*args, **kwargs)

        return wrapper

    return decorator


def ensure_student_access(identity: CallerIdentity, permission: Permission, student_id: int) -> None:
    """Students may only read their own records and summary."""

    if is_self_scoped(identity.role, permission) and identity.actor_id != int(student_id):
        raise AuthorizationError("Students can only access their own attendance")


def acting_teacher_id(identity: CallerIdentity, requested_teacher_id: Any = None) -> int:
    """Teacher recorded as the marking actor for a write made by `identity`."""

    if identity.role == Role.TEACHER:
        if requested_teacher_id in (None, ""):
            return identity.actor_id
        if require_positive_id(requested_teacher_id, "teacher_id") != identity.actor_id:
            raise AuthorizationError("Teachers can only mark attendance as themselves")
        return identity.actor_id
    if identity.role == Role.ADMIN:
        if requested_teacher_id in (None, ""):
            raise ValidationError("teacher_id is required when an admin marks attendance")
        return require_positive_id(requested_teacher_id, "teacher_id")
    raise AuthorizationError("You do not have permission for this action")
