"""
Domain errors - raised by services, translated to HTTP by the API adapter.
Each error carries the status code and the message shown to clients.
"""

from typing import List, Dict, Optional


class AppError(Exception):
    """Base class for errors that reach the client"""
    status: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(AppError):
    """Malformed input, with per-field details"""
    status = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.errors = errors

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class BadRequestError(AppError):
    status = 400
    default_message = "Bad request"


class DuplicateEmailError(BadRequestError):
    default_message = "Email already registered."


class InvalidCredentialsError(BadRequestError):
    default_message = "Invalid credentials."


class AlreadyJoinedError(BadRequestError):
    default_message = "Already joined this event"


class AuthenticationError(AppError):
    """Missing, invalid or expired token"""
    status = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    """Acting on a resource the caller does not own"""
    status = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status = 404
    default_message = "Not found"
