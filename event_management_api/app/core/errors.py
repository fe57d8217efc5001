"""
Domain exceptions raised by services and dependencies.

Every error the API reports on purpose derives from ``ApiError`` and
carries the HTTP status it maps to.  The exception handlers registered
in ``main.py`` render them as ``{"message": ..., "errors": ...}``
JSON bodies, so services never build HTTP responses themselves.
"""

from typing import Dict, List, Optional


class ApiError(Exception):
    """Base class for errors rendered as structured JSON responses."""

    status_code: int = 500
    message: str = "Server Error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None) -> None:
        self.message = message or self.message
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(ApiError):
    """Request data failed validation (422).

    ``errors`` maps a field name to the list of messages for that field.
    """

    status_code = 422

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None) -> None:
        self.errors = errors
        if message is None:
            # Same convention as the framework: first message, plus a count.
            messages = [m for field_messages in errors.values() for m in field_messages]
            message = messages[0] if messages else "The given data was invalid."
            if len(messages) > 1:
                message += f" (and {len(messages) - 1} more error{'s' if len(messages) > 2 else ''})"
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class AuthenticationError(ApiError):
    """Missing, unknown or revoked bearer token (401)."""

    status_code = 401
    message = "Unauthenticated."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(ApiError):
    """Authenticated, but not allowed to act on the resource (403)."""

    status_code = 403
    message = "This action is unauthorized."


class NotFoundError(ApiError):
    """The addressed resource does not exist (404)."""

    status_code = 404
    message = "Not Found."


class RateLimitError(ApiError):
    """Too many requests within the current window (429)."""

    status_code = 429
    message = "Too Many Attempts."

    def __init__(self, retry_after: int, limit: int) -> None:
        self.retry_after = retry_after
        super().__init__(
            headers={
                "Retry-After": str(retry_after),
                "X-RateLimit-Limit": str(limit),
                "X-RateLimit-Remaining": "0",
            }
        )
