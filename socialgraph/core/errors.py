# socialgraph/core/errors.py

"""Typed failures shared by the server and the client library.

Every error a caller can see is one of these. The API maps them to HTTP
responses of the form::

    {
        "error": "AlreadyExists",
        "code": "ALREADY_EXISTS",
        "detail": "Friend request already sent",
        "details": {"status": "pending", "friendship_id": "..."}
    }

and ``socialgraph.client.api`` maps the same body back to the class.
"""

from typing import Any, Dict, Optional, Type


class SocialGraphError(Exception):
    """Base class for every typed failure."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "error": type(self).__name__,
            "code": self.code,
            "detail": self.message,
        }
        if self.details:
            body["details"] = self.details
        return body


class PermissionDenied(SocialGraphError):
    """A device capability (contacts) was withheld by the user."""

    status_code = 403
    code = "PERMISSION_DENIED"
    default_message = "Contacts permission not granted"


class Unauthorized(SocialGraphError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Could not validate credentials"


class VendorError(SocialGraphError):
    """The OTP vendor refused the request (bad number, throttling, outage)."""

    status_code = 502
    code = "VENDOR_ERROR"
    default_message = "Failed to send verification"


class InvalidCode(SocialGraphError):
    status_code = 400
    code = "INVALID_CODE"
    default_message = "Invalid verification code"


class AlreadyExists(SocialGraphError):
    status_code = 409
    code = "ALREADY_EXISTS"
    default_message = "Relationship already exists"


class InvalidState(SocialGraphError):
    status_code = 409
    code = "INVALID_STATE"
    default_message = "Friend request is no longer pending"


class Forbidden(SocialGraphError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Not allowed"


class NotFound(SocialGraphError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


class PersistenceError(SocialGraphError):
    """A write failed after an external side effect already succeeded.

    Callers retry the same request; the server re-drives only the write.
    """

    status_code = 503
    code = "PERSISTENCE_ERROR"
    default_message = "Verified but failed to save. Try again."


class PushDeliveryError(SocialGraphError):
    """Push vendor failure. Logged by the dispatcher, never surfaced."""

    status_code = 502
    code = "PUSH_FAILED"
    default_message = "Push delivery failed"


class ServiceUnavailable(SocialGraphError):
    """Client side: the API could not be reached or answered garbage."""

    status_code = 503
    code = "SERVICE_UNAVAILABLE"
    default_message = "Service unavailable"


ERRORS_BY_NAME: Dict[str, Type[SocialGraphError]] = {
    cls.__name__: cls
    for cls in (
        PermissionDenied,
        Unauthorized,
        VendorError,
        InvalidCode,
        AlreadyExists,
        InvalidState,
        Forbidden,
        NotFound,
        PersistenceError,
        PushDeliveryError,
        ServiceUnavailable,
    )
}
