"""Tests for the per-course roster."""

import math
import unittest

from studium.core.enums import UserRole
from studium.core.exceptions import AlreadyEnrolledError, NotEnrolledError, ValidationError
from studium.core.grading import GradeEntry, GradingStrategy
from studium.core.roster import Roster
from studium.core.users import User


def make_student(username="bob"):
    return User(username.capitalize(), username, "pw", UserRole.STUDENT)


class TestRoster(unittest.TestCase):

    def setUp(self):
        self.roster = Roster()
        self.bob = make_student("bob")
        self.eve = make_student("eve")

    def test_enroll_preserves_order(self):
        self.roster.enroll(self.bob)
        self.roster.enroll(self.eve)
        self.assertEqual(self.roster.enrolled_students(), [self.bob, self.eve])
        self.assertEqual(len(self.roster), 2)
        self.assertIn(self.bob, self.roster)

    def test_enroll_twice_raises_and_keeps_single_entry(self):
        self.roster.enroll(self.bob)
        with self.assertRaises(AlreadyEnrolledError):
            self.roster.enroll(self.bob)
        self.assertEqual(self.roster.enrolled_students(), [self.bob])

    def test_add_grade_requires_enrollment(self):
        with self.assertRaises(NotEnrolledError):
            self.roster.add_grade(self.bob, 90)
        self.assertEqual(len(self.roster), 0)

    def test_final_grade_requires_enrollment(self):
        with self.assertRaises(NotEnrolledError):
            self.roster.final_grade(self.bob, GradingStrategy.UNWEIGHTED_MEAN)

    def test_final_grade_without_grades_is_zero(self):
        self.roster.enroll(self.bob)
        self.assertEqual(self.roster.final_grade(self.bob, GradingStrategy.WEIGHTED_MEAN), 0.0)

    def test_grades_are_appended_in_order(self):
        self.roster.enroll(self.bob)
        self.roster.add_grade(self.bob, 70)
        self.roster.add_grade(self.bob, 95, 2)
        self.assertEqual(self.roster.grades_for(self.bob),
                         (GradeEntry(70.0, 1.0), GradeEntry(95.0, 2.0)))

    def test_invalid_weight_and_grade(self):
        self.roster.enroll(self.bob)
        with self.assertRaises(ValidationError):
            self.roster.add_grade(self.bob, 90, -1)
        with self.assertRaises(ValidationError):
            self.roster.add_grade(self.bob, math.nan)
        with self.assertRaises(ValidationError):
            self.roster.add_grade(self.bob, 90, math.inf)
        self.assertEqual(self.roster.grades_for(self.bob), ())

    def test_zero_weight_is_allowed(self):
        self.roster.enroll(self.bob)
        self.roster.add_grade(self.bob, 50, 0)
        self.assertEqual(self.roster.final_grade(self.bob, GradingStrategy.WEIGHTED_MEAN), 0.0)
        self.assertEqual(self.roster.final_grade(self.bob, GradingStrategy.UNWEIGHTED_MEAN), 50.0)


if __name__ == "__main__":
    unittest.main()
