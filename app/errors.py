"""
Error Taxonomy

Every failure a handler can report is an ``ApiError``. The exception handlers
registered in ``main.py`` turn them into the JSON envelope clients see:

    {"success": false, "message": "...", "error": "CODE", "errors": {...}}
"""
from typing import Any, Dict, Optional


class ApiError(Exception):
    status_code = 500
    error = "INTERNAL_ERROR"

    def __init__(self, message: str, error: Optional[str] = None,
                 errors: Optional[Dict[str, str]] = None, **extra: Any):
        super().__init__(message)
        self.message = message
        if error is not None:
            self.error = error
        self.errors = errors
        self.extra = extra

    def to_response(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        else:
            body["error"] = self.error
        body.update(self.extra)
        return body


class ValidationError(ApiError):
    status_code = 400
    error = "VALIDATION_ERROR"


class UnauthenticatedError(ApiError):
    """No session at all."""
    status_code = 401
    error = "No active session"


class AuthenticationFailedError(ApiError):
    status_code = 401
    error = "AUTH_FAILED"


class ForbiddenError(ApiError):
    """A session exists but its token is expired or invalid."""
    status_code = 403
    error = "Invalid token"


class NotFoundError(ApiError):
    status_code = 404
    error = "NOT_FOUND"


class BookNotFoundError(NotFoundError):
    error = "BOOK_NOT_FOUND"

    def __init__(self, isbn: str, **extra: Any):
        super().__init__(f"Book with ISBN {isbn} not found", **extra)
        self.isbn = isbn


class ReviewNotFoundError(NotFoundError):
    error = "REVIEW_NOT_FOUND"

    def __init__(self, isbn: str, username: str, **extra: Any):
        super().__init__(f"No review found for user {username}", **extra)
        self.isbn = isbn
        self.username = username


class ConflictError(ApiError):
    status_code = 409
    error = "CONFLICT"
