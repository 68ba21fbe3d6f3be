"""FastAPI dependencies for authentication, services and database."""

from typing import Annotated, Awaitable, Callable

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.guard import AccessGuard, GuardResult
from app.db.session import get_db
from app.models.user import ADMIN_ROLES, EMPLOYER_ROLES, JOB_SEEKER_ROLES, User
from app.services.application_service import ApplicationLifecycle
from app.services.container import ServiceContainer
from app.services.session_store import SessionStore
from app.services.verification_service import EmployerVerification


def get_services(request: Request) -> ServiceContainer:
    """Service container built in the application lifespan."""
    return request.app.state.services


async def get_session_store(
    db: Annotated[AsyncSession, Depends(get_db)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> SessionStore:
    return SessionStore(db, services.settings.session_duration)


async def get_access_guard(
    store: Annotated[SessionStore, Depends(get_session_store)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> AccessGuard:
    return AccessGuard(store, services.codec, services.settings.SESSION_COOKIE_NAME)


async def get_lifecycle(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ApplicationLifecycle:
    """Get application lifecycle service instance."""
    return ApplicationLifecycle(db)


async def get_verification(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> EmployerVerification:
    return EmployerVerification(db)


def _identity_or_raise(result: GuardResult) -> User:
    if not result.ok:
        raise result.error
    return result.identity


async def get_current_user(
    request: Request,
    guard: Annotated[AccessGuard, Depends(get_access_guard)],
) -> User:
    """Get current authenticated user from the session cookie."""
    return _identity_or_raise(await guard.require_auth(request))


def require_role(*roles: str) -> Callable[..., Awaitable[User]]:
    """Build a dependency that admits only callers holding one of ``roles``."""
    allowed = frozenset(roles)

    async def dependency(
        request: Request,
        guard: Annotated[AccessGuard, Depends(get_access_guard)],
    ) -> User:
        return _identity_or_raise(await guard.require_role(request, allowed))

    return dependency


require_job_seeker = require_role(*JOB_SEEKER_ROLES)
require_employer = require_role(*EMPLOYER_ROLES)
require_admin = require_role(*ADMIN_ROLES)

CurrentUser = Annotated[User, Depends(get_current_user)]
JobSeeker = Annotated[User, Depends(require_job_seeker)]
Employer = Annotated[User, Depends(require_employer)]
Admin = Annotated[User, Depends(require_admin)]
