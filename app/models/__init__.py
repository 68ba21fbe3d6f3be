"""SQLAlchemy models."""

from app.models.user import User, UserRole, VerificationStatus
from app.models.user_session import UserSession
from app.models.job import Job
from app.models.application import Application, ApplicationStatus, InterviewType

__all__ = [
    "User",
    "UserRole",
    "VerificationStatus",
    "UserSession",
    "Job",
    "Application",
    "ApplicationStatus",
    "InterviewType",
]
