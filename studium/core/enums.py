"""
Enumerations and constants for the Studium core.
"""

from enum import Enum
from typing import Dict, FrozenSet

from .exceptions import ValidationError


class UserRole(Enum):
    """Closed set of user roles."""
    STUDENT = "student"
    TEACHER = "teacher"
    ADMINISTRATOR = "administrator"

    @classmethod
    def parse(cls, text: str) -> "UserRole":
        """Resolve a role from user input such as ``"admin"`` or ``"Teacher"``."""
        key = (text or "").strip().lower()
        if key == "admin":
            key = cls.ADMINISTRATOR.value
        try:
            return cls(key)
        except ValueError:
            raise ValidationError(
                f"Unknown user role: {text!r}",
                error_code="UNKNOWN_ROLE",
                details={'role': text}
            ) from None


class Capability(Enum):
    """Actions a role may be permitted to perform."""
    ENROLL = "enroll"
    VIEW_RESULTS = "view_results"
    CREATE_COURSE = "create_course"
    EDIT_COURSE = "edit_course"
    GRADE = "grade"
    VIEW_ALL_USERS = "view_all_users"


ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.STUDENT: frozenset({Capability.ENROLL, Capability.VIEW_RESULTS}),
    UserRole.TEACHER: frozenset({
        Capability.CREATE_COURSE, Capability.EDIT_COURSE, Capability.GRADE
    }),
    UserRole.ADMINISTRATOR: frozenset({Capability.VIEW_ALL_USERS}),
}
