"""
Core module containing the domain model of the record keeper.
"""

from .exceptions import *
from .enums import UserRole, Capability, ROLE_CAPABILITIES
from .grading import GradeEntry, GradingStrategy, unweighted_mean, weighted_mean
from .users import User, has_capability, require_capability
from .roster import Roster, RosterEntry
from .notifications import NotificationHub
from .course import Course
from .directory import Directory

__all__ = [
    # Domain
    "User",
    "Course",
    "Roster",
    "RosterEntry",
    "NotificationHub",
    "Directory",
    "GradeEntry",
    "GradingStrategy",
    "unweighted_mean",
    "weighted_mean",
    "has_capability",
    "require_capability",
    
    # Enums
    "UserRole",
    "Capability",
    "ROLE_CAPABILITIES",
    
    # Exceptions
    "StudiumException",
    "ValidationError",
    "AuthorizationError",
    "DuplicateUsernameError",
    "InvalidCredentialsError",
    "AlreadyEnrolledError",
    "NotEnrolledError",
    "ResourceNotFoundError",
    "ConfigurationError",
]
