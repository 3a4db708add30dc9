"""
Courses: the enrollment and grading facade over a roster, a notification hub
and a grading strategy.
"""

import logging
import threading
from typing import Any, Dict, List, Tuple

from .abstract_entity import AbstractEntity
from .enums import Capability
from .exceptions import AuthorizationError
from .grading import GradeEntry, GradingStrategy
from .notifications import NotificationHub
from .roster import Roster
from .users import User, require_capability

logger = logging.getLogger(__name__)


ENROLLED_MESSAGE = "You have been enrolled in course {name}."
UPDATED_MESSAGE = "Course {name} has been updated."


class Course(AbstractEntity):
    """A course owned by a teacher."""
    
    def __init__(self, name: str, description: str, teacher: User,
                 grading_strategy: GradingStrategy = GradingStrategy.UNWEIGHTED_MEAN):
        super().__init__()
        self._name = name
        self._description = description
        self._teacher = teacher
        self._grading_strategy = grading_strategy
        self._roster = Roster()
        self._hub = NotificationHub()
        self._lock = threading.RLock()
    
    @property
    def name(self) -> str:
        return self._name
    
    @property
    def description(self) -> str:
        return self._description
    
    @property
    def teacher(self) -> User:
        return self._teacher
    
    @property
    def grading_strategy(self) -> GradingStrategy:
        return self._grading_strategy
    
    @property
    def subscriber_count(self) -> int:
        return len(self._hub)
    
    def is_taught_by(self, teacher: User) -> bool:
        return self._teacher is teacher
    
    def register_student(self, student: User) -> None:
        """Enroll a student, subscribe them and confirm by notification.

        The roster entry, the subscription and the student's back-reference are
        created together; if any step fails the earlier ones are undone.
        """
        require_capability(student, Capability.ENROLL)
        with self._lock:
            self._roster.enroll(student)
            was_observer = student.id in self._hub
            try:
                self._hub.subscribe(student.id, student.receive)
                student._attach_course(self)
            except Exception:
                if not was_observer:
                    self._hub.unsubscribe(student.id)
                student._detach_course(self)
                self._roster.withdraw(student)
                raise
            self.touch()
            logger.info("Enrolled %s in %s", student.username, self._name)
            self._hub.notify(ENROLLED_MESSAGE.format(name=self._name))
    
    def add_grade(self, student: User, grade: float, weight: float = 1.0) -> GradeEntry:
        with self._lock:
            entry = self._roster.add_grade(student, grade, weight)
            logger.info("Recorded grade %s (weight %s) for %s in %s",
                        entry.grade, entry.weight, student.username, self._name)
            return entry
    
    def final_grade(self, student: User) -> float:
        with self._lock:
            return self._roster.final_grade(student, self._grading_strategy)
    
    def grades_for(self, student: User) -> Tuple[GradeEntry, ...]:
        with self._lock:
            return self._roster.grades_for(student)
    
    def enrolled_students(self) -> List[User]:
        with self._lock:
            return self._roster.enrolled_students()
    
    def require_owner(self, actor: User, capability: Capability) -> None:
        """Raise AuthorizationError unless ``actor`` may do ``capability`` here.

        Only the owning teacher may edit or grade a course.
        """
        require_capability(actor, capability)
        if not self.is_taught_by(actor):
            raise AuthorizationError(
                f"{actor.username!r} does not teach {self._name}",
                error_code="NOT_COURSE_OWNER",
                details={'user_id': actor.id, 'course_id': self.id}
            )
    
    def set_description(self, new_description: str) -> int:
        """Replace the description and tell every subscriber; return deliveries."""
        with self._lock:
            self._description = new_description
            self.touch()
            logger.info("Updated description of %s", self._name)
            return self._hub.notify(UPDATED_MESSAGE.format(name=self._name))
    
    def set_grading_strategy(self, strategy: GradingStrategy) -> None:
        with self._lock:
            self._grading_strategy = strategy
            self.touch()
    
    def add_observer(self, student: User) -> None:
        with self._lock:
            self._hub.subscribe(student.id, student.receive)
    
    def remove_observer(self, student: User) -> None:
        with self._lock:
            self._hub.unsubscribe(student.id)
    
    def to_dict(self) -> Dict[str, Any]:
        base_dict = super().to_dict()
        base_dict.update({
            'name': self._name,
            'description': self._description,
            'teacher_id': self._teacher.id,
            'grading_strategy': self._grading_strategy.value,
            'enrolled_students': [student.id for student in self.enrolled_students()],
        })
        return base_dict
