"""
LoveStack Backend — Custom Exception Hierarchy
================================================

What:  Application-specific exceptions, one per failure class of the API.
Why:   Route handlers raise; global handlers (registered in main.py) turn the
       exception into the uniform error envelope with the right status code.
How:   Each exception carries a human-readable message, an optional
       `details` string surfaced to the client, and a context dict that is
       logged but never returned.

Exception Hierarchy:
    LoveStackError (base)
    ├── AuthenticationError     → 401 {error}
    ├── ValidationError         → 400 {error, details?}
    ├── PermissionDeniedError   → 403 {error}
    ├── NotFoundError           → 404 {error}
    ├── ConflictError           → 409 {error, ...}
    ├── DatabaseError           → 500 {error, details?}
    ├── ExternalServiceError    → upstream status or 500 {error}
    └── EmailDeliveryError      → 500 {message, error}

Error envelope:
    {"error": "<human string>", "details": "<underlying message>"}
    `details` is omitted when there is nothing to add.
"""

from typing import Any, Dict, Optional


class LoveStackError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Client-facing description (the envelope's `error` field)
        details:  Underlying provider message, surfaced for diagnosis
        context:  Extra debug info (logged but NOT returned to client)
        extra:    Additional top-level body fields (e.g. {"userExists": true})
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.details = details
        self.context = context or {}
        self.extra = extra or {}
        super().__init__(self.message)

    def to_envelope(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        body.update(self.extra)
        return body


class AuthenticationError(LoveStackError):
    """
    Raised when a request carries no usable credential.

    When:    No session cookie, session rejected by the auth provider,
             or a missing Authorization header / userId pair.
    HTTP:    401 Unauthorized
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Not authenticated",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(LoveStackError):
    """Raised when client input fails validation. HTTP 400."""

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx, extra=extra)
        self.field = field


class PermissionDeniedError(LoveStackError):
    """Raised when the caller is authenticated but may not act on the resource. HTTP 403."""

    status_code = 403

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(LoveStackError):
    """
    Raised when a single-row lookup comes back empty.

    What:    The provider answered, but there is no such row.
    When:    `single()` reported zero rows, or `maybe_single()` returned None
             where the handler requires a row.
    HTTP:    404 Not Found

    Why distinct from DatabaseError:
        "No such row" is a normal answer; a query failure is not. The two
        must never collapse into the same status code.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "Not found",
        resource: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource:
            ctx["resource"] = resource
        super().__init__(message=message, context=ctx)


class ConflictError(LoveStackError):
    """
    Raised when the request collides with existing state.

    When:    An account or a pending invitation already exists for an email.
    HTTP:    409 Conflict, `extra` fields merged into the body.
    """

    status_code = 409

    def __init__(
        self,
        message: str = "Conflict",
        extra: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context, extra=extra)


class DatabaseError(LoveStackError):
    """
    Raised when a database query fails.

    What:    PostgREST or GoTrue reported an error, or the request never
             reached them (timeout, connection refused).
    HTTP:    500 Internal Server Error, provider message in `details`.
    """

    def __init__(
        self,
        message: str = "Database error",
        details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details, context=context)


class ExternalServiceError(LoveStackError):
    """
    Raised when a non-database provider (OpenAI, Gmail) fails.

    `status_code` is per instance so an upstream 4xx/5xx can be relayed.
    """

    def __init__(
        self,
        message: str = "External service error",
        status_code: int = 500,
        details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, details=details, context=context)
        self.status_code = status_code


class EmailDeliveryError(LoveStackError):
    """
    Raised when the transactional-email provider rejects a send.

    Response shape differs from the standard envelope:
        {"message": "<what failed>", "error": <provider error payload>}
    The provider payload is embedded verbatim so callers can see Resend's
    own error name and message.
    """

    def __init__(
        self,
        message: str = "Failed to send email",
        provider_error: Any = None,
        extra: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.provider_error = provider_error
        self.extra = extra or {}

    def to_envelope(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message, "error": self.provider_error}
        body.update(self.extra)
        return body
