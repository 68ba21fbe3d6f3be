"""Persisted login sessions with lazy expiry."""

import secrets
from datetime import timedelta
from uuid import UUID

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.types import utcnow
from app.models.user import User
from app.models.user_session import UserSession

logger = structlog.get_logger(__name__)

SESSION_ID_BYTES = 32


class SessionStore:
    """Creates, validates and destroys ``user_sessions`` rows."""

    def __init__(self, db: AsyncSession, duration: timedelta) -> None:
        self.db = db
        self.duration = duration

    @staticmethod
    def new_session_id() -> str:
        """Random opaque session identifier."""
        return secrets.token_urlsafe(SESSION_ID_BYTES)

    async def create_session(self, user_id: UUID) -> str:
        """Persist a new session for ``user_id`` and return its id."""
        session_id = self.new_session_id()
        now = utcnow()
        self.db.add(
            UserSession(
                id=session_id,
                user_id=user_id,
                created_at=now,
                expires_at=now + self.duration,
            )
        )
        await self.db.commit()
        logger.info("session_created", user_id=str(user_id))
        return session_id

    async def validate_session(self, session_id: str) -> User | None:
        """
        Resolve a session id to its user.

        Expired rows are deleted on sight. The delete is idempotent, so
        concurrent validations of the same expired session all return None.
        """
        if not session_id:
            return None

        result = await self.db.execute(select(UserSession).where(UserSession.id == session_id))
        session = result.scalar_one_or_none()
        if session is None:
            return None

        user_id = session.user_id
        if session.expires_at <= utcnow():
            await self.destroy_session(session_id)
            logger.info("session_expired", user_id=str(user_id))
            return None

        return await self.get_active_user(user_id)

    async def get_active_user(self, user_id: UUID) -> User | None:
        """Load a user by id, or None when missing or deactivated."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None or not user.is_active:
            return None
        return user

    async def destroy_session(self, session_id: str) -> None:
        """Delete a session. Deleting a missing session is a no-op."""
        await self.db.execute(delete(UserSession).where(UserSession.id == session_id))
        await self.db.commit()

    async def purge_expired(self) -> int:
        """Bulk-delete every expired session and return how many were removed."""
        result = await self.db.execute(
            delete(UserSession).where(UserSession.expires_at <= utcnow())
        )
        await self.db.commit()
        return result.rowcount or 0
