"""Authentication endpoints."""

from datetime import timedelta
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.exceptions import DuplicateAccount, InactiveAccount, InvalidCredentials
from app.db.session import get_db
from app.dependencies import Admin, CurrentUser, get_services, get_session_store
from app.models.user import User
from app.schemas.user import AuthResponse, MessageResponse, UserCreate, UserLogin, UserResponse
from app.services.container import ServiceContainer
from app.services.session_store import SessionStore

logger = structlog.get_logger(__name__)

router = APIRouter()


def set_session_cookie(response: Response, session_id: str, settings: Settings) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        session_id,
        max_age=int(settings.session_duration.total_seconds()),
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        settings.SESSION_COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="none" if settings.is_production else "lax",
        path="/",
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    services: Annotated[ServiceContainer, Depends(get_services)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> UserResponse:
    """
    Register a new job seeker or employer and start a session.

    - **email**: User email (must be unique)
    - **password**: User password (min 8 characters)
    - **role**: `job_seeker` (default) or `employer`
    - **phone**: Optional phone number (must be unique)
    """
    conditions = [User.email == user_data.email]
    if user_data.phone:
        conditions.append(User.phone == user_data.phone)
    result = await db.execute(select(User).where(or_(*conditions)))
    existing_user = result.scalars().first()
    if existing_user:
        if existing_user.email == user_data.email:
            raise DuplicateAccount("An account with this email already exists")
        raise DuplicateAccount("An account with this phone number already exists")

    user = User(
        email=user_data.email,
        password_hash=services.vault.hash(user_data.password),
        role=user_data.role,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        phone=user_data.phone,
        company_name=user_data.company_name,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("user_registered", user_id=str(user.id), role=user.role)

    session_id = await store.create_session(user.id)
    set_session_cookie(response, session_id, services.settings)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=AuthResponse, status_code=status.HTTP_200_OK)
async def login(
    credentials: UserLogin,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
    services: Annotated[ServiceContainer, Depends(get_services)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> AuthResponse:
    """
    Authenticate user, set the `session` cookie and return a bearer token.

    - **email**: User email
    - **password**: User password
    """
    result = await db.execute(select(User).where(User.email == credentials.email))
    user = result.scalar_one_or_none()
    if not user or not services.vault.verify(credentials.password, user.password_hash):
        logger.info("login_failed", email=credentials.email)
        raise InvalidCredentials()

    if not user.is_active:
        raise InactiveAccount()

    session_id = await store.create_session(user.id)
    set_session_cookie(response, session_id, services.settings)

    access_token = services.codec.create_access_token(
        user.id, timedelta(minutes=services.settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return AuthResponse(user=UserResponse.model_validate(user), access_token=access_token)


@router.post("/logout", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def logout(
    request: Request,
    response: Response,
    services: Annotated[ServiceContainer, Depends(get_services)],
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> MessageResponse:
    """Destroy the current session, if any. Always succeeds."""
    session_id = request.cookies.get(services.settings.SESSION_COOKIE_NAME)
    if session_id:
        await store.destroy_session(session_id)
    clear_session_cookie(response, services.settings)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse, status_code=status.HTTP_200_OK)
async def get_current_user_info(current_user: CurrentUser) -> UserResponse:
    """
    Get current authenticated user information.

    Requires authentication.
    """
    return UserResponse.model_validate(current_user)


@router.post("/sessions/purge", status_code=status.HTTP_200_OK)
async def purge_expired_sessions(
    admin: Admin,
    store: Annotated[SessionStore, Depends(get_session_store)],
) -> dict[str, int]:
    """Delete every expired session. Admin only."""
    removed = await store.purge_expired()
    logger.info("sessions_purged", removed=removed, admin_id=str(admin.id))
    return {"removed": removed}
