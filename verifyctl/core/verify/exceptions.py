"""Verify-specific exceptions for error handling.

Every failure raised by the resource access layer derives from ``VerifyError``
and carries a stable ``kind`` string so callers can tell failures apart
without parsing messages.
"""
from __future__ import annotations
from typing import Optional


class VerifyError(Exception):
    """Base exception for all Verify operations."""

    kind = "Error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ClassifiedError(VerifyError):
    """HTTP failure normalized by the error classifier.

    Attributes:
        detail: Human-readable detail
        message_id: Service message identifier (400 responses only)
        status_code: HTTP status code, when the error came from a response
        body: Raw response body, when the error came from a response
    """

    def __init__(
        self,
        detail: str,
        *,
        message_id: Optional[str] = None,
        status_code: Optional[int] = None,
        body: str = "",
    ):
        self.detail = detail
        self.message_id = message_id
        self.status_code = status_code
        self.body = body
        super().__init__(detail)


class UnauthenticatedError(ClassifiedError):
    """401 - token missing, expired or revoked."""

    kind = "Unauthenticated"

    def __init__(self, detail: str = "Login again.", **kwargs):
        super().__init__(detail, **kwargs)


class ForbiddenError(ClassifiedError):
    """403 - the session lacks the required entitlements."""

    kind = "Forbidden"

    def __init__(
        self,
        detail: str = "You are not allowed to make this request. Check the client or application entitlements.",
        **kwargs,
    ):
        super().__init__(detail, **kwargs)


class NotFoundError(ClassifiedError):
    """404, or a name lookup that matched nothing."""

    kind = "NotFound"

    def __init__(self, detail: str = "Resource not found", *, name: Optional[str] = None, **kwargs):
        self.name = name
        super().__init__(detail, **kwargs)


class BadRequestError(ClassifiedError):
    """400 - the service rejected the request payload."""

    kind = "BadRequest"


class UnclassifiedError(ClassifiedError):
    """Any status the classifier has no dedicated kind for."""

    kind = "Unclassified"

    def __init__(self, status_code: int, body: str, detail: Optional[str] = None):
        super().__init__(
            detail or f"unexpected response; code={status_code}, body={body}",
            status_code=status_code,
            body=body,
        )


class ValidationError(VerifyError):
    """Local document validation failed; nothing was sent."""

    kind = "ValidationError"

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"{field} is required")


class NoActiveSessionError(VerifyError):
    """No login session exists for the current tenant."""

    kind = "NoActiveSession"

    def __init__(self, message: str = "No login session available. Use:\n  verifyctl login -h"):
        super().__init__(message)


class AmbiguousNameError(VerifyError):
    """A name lookup matched more than one resource."""

    kind = "AmbiguousName"

    def __init__(self, name: str, count: int):
        self.name = name
        self.count = count
        super().__init__(f"{count} resources match the name '{name}'; use the resource ID instead")


class MalformedResponseError(VerifyError):
    """A successful response did not have the expected shape."""

    kind = "MalformedResponse"


class EncodingError(VerifyError):
    """A request body could not be encoded as JSON."""

    kind = "EncodingError"


class TransportError(VerifyError):
    """The request never produced an HTTP response (DNS, TLS, timeout...)."""

    kind = "TransportError"
