"""Application services."""

from app.services.application_service import ApplicationLifecycle
from app.services.container import ServiceContainer
from app.services.job_service import JobService
from app.services.notification_dispatcher import NotificationDispatcher, SmsGatewayClient
from app.services.session_store import SessionStore
from app.services.verification_service import EmployerVerification

__all__ = [
    "ApplicationLifecycle",
    "ServiceContainer",
    "JobService",
    "NotificationDispatcher",
    "SmsGatewayClient",
    "SessionStore",
    "EmployerVerification",
]
