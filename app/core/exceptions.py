"""Application error hierarchy.

Every error carries the HTTP status it maps to and a stable ``code`` that
clients can branch on. The handler in ``app.main`` renders them as
``{"detail": message, "code": code, **extra}``.
"""

from typing import Any, Iterable, Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.message
        self.extra = extra
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code, **self.extra}


class InvalidCredentials(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "invalid_credentials"
    message = "Invalid credentials"


class AuthenticationRequired(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "authentication_required"
    message = "Authentication required"


class SessionExpired(AppError):
    """Session carrier present but invalid or expired."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "session_expired"
    message = "Invalid or expired session"


class InsufficientPermissions(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "insufficient_permissions"
    message = "Insufficient permissions"

    def __init__(self, required: Iterable[str], current: Optional[str]):
        self.required = sorted(required)
        self.current = current
        super().__init__(required=self.required, current=current)


class NotResourceOwner(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "not_resource_owner"
    message = "Not authorized to access this resource"


class InactiveAccount(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "inactive_account"
    message = "User is inactive"


class DuplicateAccount(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "duplicate_account"
    message = "An account with this information already exists"


class ApplicationNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "application_not_found"
    message = "Application not found"


class UserNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "user_not_found"
    message = "User not found"


class JobNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "job_not_found"
    message = "Job not found"


class InvalidTransition(AppError):
    """Requested status change is not allowed, or its required fields are missing."""

    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"
    message = "Invalid status transition"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        current: Optional[str] = None,
        target: Optional[str] = None,
        missing_field: Optional[str] = None,
    ):
        extra: dict[str, Any] = {}
        if current is not None:
            extra["current"] = current
        if target is not None:
            extra["target"] = target
        if missing_field is not None:
            # A missing field is a request problem, not a state conflict
            self.status_code = status.HTTP_400_BAD_REQUEST
            extra["missing_field"] = missing_field
        super().__init__(message, **extra)


class NotificationDeliveryFailed(AppError):
    """Non-fatal: logged and reported as a flag, never raised past the dispatcher."""

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "notification_delivery_failed"
    message = "Notification could not be delivered"


class InvalidDocumentKind(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_document_kind"
    message = "Document kinds must be non-empty and at most 100 characters"
