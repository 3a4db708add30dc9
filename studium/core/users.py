"""
User identities.

Roles are a closed set, so a single ``User`` type carries a ``UserRole`` tag
instead of one subclass per role. Role-specific state (the enrolled-course
list and notification inbox) is only populated for students.
"""

import logging
from typing import List, TYPE_CHECKING

from .abstract_entity import AbstractEntity
from .enums import Capability, ROLE_CAPABILITIES, UserRole
from .exceptions import AuthorizationError

if TYPE_CHECKING:
    from .course import Course

logger = logging.getLogger(__name__)


class User(AbstractEntity):
    """A registered user: student, teacher or administrator."""
    
    def __init__(self, name: str, username: str, password: str, role: UserRole):
        super().__init__()
        self._name = name
        self._username = username
        self._password = password
        self._role = role
        self._courses: List['Course'] = []
        self._inbox: List[str] = []
    
    @property
    def name(self) -> str:
        return self._name
    
    @property
    def username(self) -> str:
        return self._username
    
    @property
    def role(self) -> UserRole:
        return self._role
    
    @property
    def is_student(self) -> bool:
        return self._role is UserRole.STUDENT
    
    @property
    def enrolled_courses(self) -> List['Course']:
        return list(self._courses)
    
    @property
    def inbox(self) -> List[str]:
        return list(self._inbox)
    
    def check_password(self, password: str) -> bool:
        """Plain equality check; credentials are not a security feature here."""
        return self._password == password
    
    def receive(self, message: str) -> None:
        """Accept a course notification."""
        self._inbox.append(message)
        logger.info("Notification for %s: %s", self._name, message)
    
    def _attach_course(self, course: 'Course') -> None:
        self._courses.append(course)
        self.touch()
    
    def _detach_course(self, course: 'Course') -> None:
        self._courses = [c for c in self._courses if c is not course]
        self.touch()
    
    def __str__(self) -> str:
        return f"{self._role.value.capitalize()}: {self._name} ({self._username})"


def has_capability(user: User, capability: Capability) -> bool:
    """Check whether the user's role grants a capability."""
    return capability in ROLE_CAPABILITIES[user.role]


def require_capability(user: User, capability: Capability) -> None:
    """Raise AuthorizationError unless the user's role grants a capability."""
    if not has_capability(user, capability):
        raise AuthorizationError(
            f"{user.role.value} {user.username!r} may not {capability.value}",
            error_code="FORBIDDEN",
            details={'user_id': user.id, 'capability': capability.value}
        )
