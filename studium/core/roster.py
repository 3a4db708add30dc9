"""
Per-course enrollment and grade records.
"""

import math
from typing import Dict, List, Tuple

from .exceptions import AlreadyEnrolledError, NotEnrolledError, ValidationError
from .grading import GradeEntry, GradingStrategy
from .users import User


class RosterEntry:
    """A student and the grades recorded for them, in recording order."""
    
    def __init__(self, student: User):
        self.student = student
        self.grades: List[GradeEntry] = []


class Roster:
    """Enrolled students of one course and their grade history."""
    
    def __init__(self):
        self._entries: Dict[str, RosterEntry] = {}  # student id -> entry
    
    def enroll(self, student: User) -> None:
        """Add an empty entry for a student."""
        if student.id in self._entries:
            raise AlreadyEnrolledError(
                f"{student.username!r} is already enrolled",
                error_code="ALREADY_ENROLLED",
                details={'student_id': student.id}
            )
        self._entries[student.id] = RosterEntry(student)
    
    def withdraw(self, student: User) -> None:
        """Drop an entry; used only to undo a failed enrollment."""
        self._entries.pop(student.id, None)
    
    def add_grade(self, student: User, grade: float, weight: float = 1.0) -> GradeEntry:
        """Append a grade to an enrolled student's entry."""
        entry = self._entry_for(student)
        if not math.isfinite(grade):
            raise ValidationError("Grade must be a finite number", error_code="INVALID_GRADE",
                                  details={'grade': grade})
        if not math.isfinite(weight) or weight < 0:
            raise ValidationError("Weight must be a finite, non-negative number",
                                  error_code="INVALID_WEIGHT", details={'weight': weight})
        recorded = GradeEntry(float(grade), float(weight))
        entry.grades.append(recorded)
        return recorded
    
    def final_grade(self, student: User, strategy: GradingStrategy) -> float:
        return strategy.compute(self._entry_for(student).grades)
    
    def grades_for(self, student: User) -> Tuple[GradeEntry, ...]:
        return tuple(self._entry_for(student).grades)
    
    def enrolled_students(self) -> List[User]:
        return [entry.student for entry in self._entries.values()]
    
    def is_enrolled(self, student: User) -> bool:
        return student.id in self._entries
    
    def _entry_for(self, student: User) -> RosterEntry:
        entry = self._entries.get(student.id)
        if entry is None:
            raise NotEnrolledError(
                f"{student.username!r} is not enrolled",
                error_code="NOT_ENROLLED",
                details={'student_id': student.id}
            )
        return entry
    
    def __contains__(self, student: User) -> bool:
        return self.is_enrolled(student)
    
    def __len__(self) -> int:
        return len(self._entries)
