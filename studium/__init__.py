"""
Studium: an academic record keeper.

Users with roles, courses owned by teachers, student enrollment, and grade
recording with a pluggable grade-aggregation policy.
"""

__version__ = "1.0.0"
__author__ = "Studium Development Team"
__description__ = "Academic record keeper with enrollment, grading and notifications"
