"""Pydantic schemas for request/response validation."""

from app.schemas.user import (
    AuthResponse,
    MessageResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    VerificationActionResponse,
    VerificationRejection,
)
from app.schemas.job import JobCreate, JobResponse
from app.schemas.application import (
    ApplicationActionResponse,
    ApplicationCreate,
    ApplicationResponse,
    DocumentRequest,
    DocumentSubmission,
    InterviewDetails,
    StatusUpdate,
)

__all__ = [
    "AuthResponse",
    "MessageResponse",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "VerificationActionResponse",
    "VerificationRejection",
    "JobCreate",
    "JobResponse",
    "ApplicationActionResponse",
    "ApplicationCreate",
    "ApplicationResponse",
    "DocumentRequest",
    "DocumentSubmission",
    "InterviewDetails",
    "StatusUpdate",
]
