"""
Application error taxonomy.

Services raise these; the handlers registered in main.py turn them into
the JSON body {"message": "..."} with the matching HTTP status.
"""

from fastapi import status


class AppError(Exception):
    """Base error. Carries the client-facing message and HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ValidationError):
    """Duplicate or self-referencing mentorship requests (reported as 400)."""


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class UnexpectedError(AppError):
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
