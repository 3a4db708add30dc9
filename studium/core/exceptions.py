"""
Custom exceptions for the Studium core.
"""

from typing import Optional, Any, Dict


class StudiumException(Exception):
    """Base exception for all Studium-related errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(StudiumException):
    """Raised when data validation fails."""
    pass


class AuthorizationError(StudiumException):
    """Raised when a user lacks the capability for an action."""
    pass


class DuplicateUsernameError(StudiumException):
    """Raised when registering a username that is already taken."""
    pass


class InvalidCredentialsError(StudiumException):
    """Raised when no user matches a username/password pair."""
    pass


class AlreadyEnrolledError(StudiumException):
    """Raised when enrolling a student who already has a roster entry."""
    pass


class NotEnrolledError(StudiumException):
    """Raised when grading or querying a student who is not enrolled."""
    pass


class ResourceNotFoundError(StudiumException):
    """Raised when a requested user or course is not found."""
    pass


class ConfigurationError(StudiumException):
    """Raised when configuration is invalid."""
    pass
