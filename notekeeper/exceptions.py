"""
Notekeeper — Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for every failure the API can report.
How:   Each exception carries a client-safe message and an optional context
       dict. Global exception handlers (registered in main.py) translate them
       into structured JSON error responses with the right HTTP status code.
Who:   Raised by services, dependencies and middleware; caught by global handlers.

Exception Hierarchy:
    NotekeeperError (base)
    ├── ValidationError              → 400 Bad Request
    ├── InvalidIdError               → 400 Bad Request (malformed identifier)
    ├── NotFoundError                → 404 Not Found
    ├── AuthenticationError          → 401 Unauthorized
    │   ├── InvalidCredentialsError  (login failed)
    │   ├── MalformedAuthHeaderError (no "Bearer " prefix)
    │   ├── InvalidTokenError        (bad signature, corrupt, expired)
    │   └── UnauthorizedError        (protected operation without a token)
    ├── ForbiddenError               → 403 Forbidden (valid token, not the owner)
    ├── DatabaseError                → 500 Internal Server Error
    └── RateLimitExceededError       → 429 Too Many Requests

InvalidIdError and NotFoundError are deliberately separate types: a malformed
identifier and a well-formed identifier with no record map to different codes.
"""

from typing import Any, Dict, Optional


class NotekeeperError(Exception):
    """
    Base exception for all Notekeeper application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only where a handler opts in)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotekeeperError):
    """
    Raised when client input fails validation.

    When:    Empty note content, short username, duplicate username, unparseable body.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "content is required",
            "details": {"field": "content"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidIdError(NotekeeperError):
    """
    Raised when a resource identifier is not syntactically valid.

    When:    GET/DELETE /api/notes/{id} where {id} is not a UUID.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"Malformed {resource} id", context=ctx)


class NotFoundError(NotekeeperError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/notes/{id} with a well-formed but unknown UUID.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class AuthenticationError(NotekeeperError):
    """
    Base for every failure that should produce 401 Unauthorized.

    `error_code` is the machine-readable code placed in the response body.
    Responses carry `WWW-Authenticate: Bearer`.
    """

    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialsError(AuthenticationError):
    """
    Login failed.

    The message is identical whether the username was unknown or the password
    was wrong; only the server-side context says which.
    """

    error_code = "invalid_credentials"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="invalid username or password", context=context)


class MalformedAuthHeaderError(AuthenticationError):
    """Authorization header present but not of the form `Bearer <token>`."""

    error_code = "malformed_auth_header"

    def __init__(
        self,
        message: str = "Authorization header must use the Bearer scheme",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTokenError(AuthenticationError):
    """Token signature mismatch, corrupt payload, missing claims, or expiry."""

    error_code = "invalid_token"

    def __init__(
        self,
        message: str = "token invalid or expired",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnauthorizedError(AuthenticationError):
    """A protected operation was attempted without a usable token."""

    error_code = "unauthorized"

    def __init__(
        self,
        message: str = "token missing",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(NotekeeperError):
    """
    Raised when an authenticated user acts on a resource they do not own.

    When:    DELETE /api/notes/{id} by someone other than the note's owner.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "only the owner may modify this resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(NotekeeperError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The original
        error type is kept in context and logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(NotekeeperError):
    """
    Raised when a client exceeds the per-IP login rate limit.

    HTTP:    429 Too Many Requests (with a Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many login attempts. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
