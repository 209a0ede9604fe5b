"""
Exception classes for the leave API.

All of them are ``HTTPException`` subclasses so routers and dependencies can
raise them directly; ``main.py`` renders them as ``{"success": false,
"message": ...}``.
"""

from typing import Dict, List, Optional
from fastapi import HTTPException, status


class LeaveAPIException(HTTPException):
    """Base exception for leave API errors"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = self.__class__.__name__


class LeaveValidationError(LeaveAPIException):
    """Field-level validation failure on a leave application."""

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        message = errors[0]["message"] if errors else "Invalid leave application"
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


class AuthenticationError(LeaveAPIException):
    """Missing or invalid session"""

    def __init__(self, detail: str = "Not authenticated"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(LeaveAPIException):
    """Authenticated but not allowed"""

    def __init__(self, detail: str = "Insufficient permissions"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundError(LeaveAPIException):

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ConflictError(LeaveAPIException):

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class TransientStoreError(LeaveAPIException):
    """The database could not serve the request; not retried here."""

    def __init__(self, detail: str = "Internal server error. Please try again later."):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
