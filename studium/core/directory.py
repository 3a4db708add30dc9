"""
The directory of all users and courses.
"""

import logging
import threading
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple, Union

from .course import Course
from .enums import Capability, UserRole
from .exceptions import DuplicateUsernameError, InvalidCredentialsError, ResourceNotFoundError
from .grading import GradeEntry, GradingStrategy
from .users import User, require_capability

logger = logging.getLogger(__name__)


class Directory:
    """Registry of users and courses with lookup, registration and login."""
    
    def __init__(self, default_grading_strategy: GradingStrategy = GradingStrategy.UNWEIGHTED_MEAN):
        self._default_grading_strategy = default_grading_strategy
        self._users: List[User] = []
        self._courses: List[Course] = []
        self._lock = threading.RLock()
    
    @property
    def default_grading_strategy(self) -> GradingStrategy:
        return self._default_grading_strategy
    
    def register_user(self, role: Union[UserRole, str], name: str, username: str,
                      password: str) -> User:
        """Create a user of the given role; usernames are unique and case-sensitive."""
        if not isinstance(role, UserRole):
            role = UserRole.parse(role)
        with self._lock:
            if any(user.username == username for user in self._users):
                raise DuplicateUsernameError(
                    f"Username {username!r} is already taken",
                    error_code="DUPLICATE_USERNAME",
                    details={'username': username}
                )
            user = User(name, username, password, role)
            self._users.append(user)
        logger.info("Registered %s", user)
        return user
    
    def authenticate(self, username: str, password: str) -> User:
        with self._lock:
            matches = [user for user in self._users
                       if user.username == username and user.check_password(password)]
        if len(matches) != 1:
            logger.warning("Failed login for %r", username)
            raise InvalidCredentialsError("Invalid username or password",
                                          error_code="INVALID_CREDENTIALS")
        return matches[0]
    
    def create_course(self, name: str, description: str, teacher: User,
                      grading_strategy: Optional[GradingStrategy] = None) -> Course:
        """Create a course. Whether ``teacher`` may own it is the caller's concern."""
        course = Course(name, description, teacher,
                        grading_strategy or self._default_grading_strategy)
        with self._lock:
            self._courses.append(course)
        logger.info("Created course %s for %s", name, teacher.username)
        return course
    
    def update_course_description(self, course: Course, new_description: str,
                                  actor: Optional[User] = None) -> int:
        """Change a course description; when ``actor`` is given it must own the course."""
        if actor is not None:
            course.require_owner(actor, Capability.EDIT_COURSE)
        return course.set_description(new_description)
    
    def record_grade(self, actor: User, course: Course, student: User, grade: float,
                     weight: float = 1.0) -> GradeEntry:
        """Add a grade on behalf of the teacher who owns the course."""
        course.require_owner(actor, Capability.GRADE)
        return course.add_grade(student, grade, weight)
    
    def all_users(self) -> List[User]:
        with self._lock:
            return list(self._users)
    
    def all_courses(self) -> List[Course]:
        with self._lock:
            return list(self._courses)
    
    def view_all_users(self, actor: User) -> List[User]:
        """The full user list, for administrators."""
        require_capability(actor, Capability.VIEW_ALL_USERS)
        return self.all_users()
    
    def courses_taught_by(self, teacher: User) -> List[Course]:
        # Linear scan; no teacher-to-course index is kept.
        return [course for course in self.all_courses() if course.is_taught_by(teacher)]
    
    def student_results(self, student: User) -> List[Tuple[str, float]]:
        """Final grade in each enrolled course, in enrollment order."""
        return [(course.name, course.final_grade(student)) for course in student.enrolled_courses]
    
    def get_user(self, user_id: str) -> User:
        with self._lock:
            for user in self._users:
                if user.id == user_id:
                    return user
        raise ResourceNotFoundError(f"User {user_id} not found", error_code="USER_NOT_FOUND",
                                    details={'user_id': user_id})
    
    def find_user(self, username: str) -> User:
        with self._lock:
            for user in self._users:
                if user.username == username:
                    return user
        raise ResourceNotFoundError(f"User {username!r} not found", error_code="USER_NOT_FOUND",
                                    details={'username': username})
    
    def get_course(self, course_id: str) -> Course:
        with self._lock:
            for course in self._courses:
                if course.id == course_id:
                    return course
        raise ResourceNotFoundError(f"Course {course_id} not found", error_code="COURSE_NOT_FOUND",
                                    details={'course_id': course_id})
    
    def get_statistics(self) -> Dict[str, Any]:
        with self._lock:
            roles = Counter(user.role.value for user in self._users)
            return {
                'total_users': len(self._users),
                'users_by_role': {role.value: roles.get(role.value, 0) for role in UserRole},
                'total_courses': len(self._courses),
                'total_enrollments': sum(len(course.enrolled_students()) for course in self._courses),
            }
