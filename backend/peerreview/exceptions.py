"""
PeerReview Backend — Custom Exception Hierarchy
=================================================

What:  Defines application-specific exceptions for every failure the core
       can report to a caller.
Why:   Services raise typed errors; global handlers registered in main.py
       translate them into structured JSON responses with the right status.
How:   Each exception carries a user-safe message and an optional context
       dict. Context is logged server-side and only returned for client
       errors where it helps the caller fix the request.

Exception Hierarchy:
    PeerReviewError (base)
    ├── ValidationError           → 400 Bad Request (caller can fix)
    ├── UnauthorizedError         → 401 Unauthorized
    │   ├── NoCredentialError     → 401 (header missing / wrong scheme)
    │   ├── MalformedTokenError   → 401 (unparseable or bad signature)
    │   └── ExpiredTokenError     → 401 (past its expiry instant)
    ├── UnknownIdentityError      → 401 (token valid, identity gone)
    ├── ForbiddenError            → 403 Forbidden (e.g. self-review)
    ├── NotFoundError             → 404 Not Found
    ├── ConflictError             → 409 Conflict (duplicate unique key)
    └── RepositoryError           → 500 Internal Server Error (opaque)
"""

from typing import Any, Dict, Optional


class PeerReviewError(Exception):
    """
    Base exception for all PeerReview application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only for client errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PeerReviewError):
    """
    Raised when caller input is missing or malformed.

    HTTP: 400 Bad Request. Never retried; the caller has to change the input.
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


class UnauthorizedError(PeerReviewError):
    """
    Raised when a request does not carry a usable credential.

    HTTP: 401 Unauthorized, with `WWW-Authenticate: Bearer`.

    Login failures raise this class directly with the same message whether
    the email is unknown or the password is wrong, so the error kind never
    reveals which accounts exist.
    """

    def __init__(
        self,
        message: str = "Not authorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NoCredentialError(UnauthorizedError):
    """Authorization header absent or not using the Bearer scheme."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="No token provided or malformed token", context=context)


class MalformedTokenError(UnauthorizedError):
    """Token could not be decoded, its signature is invalid, or claims are missing."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Invalid token", context=context)


class ExpiredTokenError(UnauthorizedError):
    """Token signature is valid but the current time is at or past its expiry."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Token expired", context=context)


class UnknownIdentityError(PeerReviewError):
    """
    Raised when a valid token names an identity the credential store no
    longer holds.

    HTTP: 401 Unauthorized
    """

    def __init__(
        self,
        identity_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if identity_id:
            ctx["identity_id"] = identity_id
        super().__init__(message="User not found", context=ctx)


class ForbiddenError(PeerReviewError):
    """
    Raised when an authenticated caller is not permitted to act.

    HTTP: 403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PeerReviewError):
    """
    Raised when a referenced resource does not exist.

    HTTP: 404 Not Found

    Repositories return None for missing records; services convert that
    into this exception so the status code is decided in one place.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(PeerReviewError):
    """
    Raised when a create would violate a unique key.

    HTTP: 409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RepositoryError(PeerReviewError):
    """
    Raised when a storage operation fails unexpectedly.

    HTTP: 500 Internal Server Error

    Security Note:
        The message returned to the client is always generic. The driver
        error type and operation name live in `context` and are only logged.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
