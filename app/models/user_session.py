"""Persisted login sessions."""

from sqlalchemy import Column, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.db.types import UTCDateTime, utcnow


class UserSession(Base):
    """Maps an opaque session id to a user until ``expires_at``."""

    __tablename__ = "user_sessions"

    id = Column(String(128), primary_key=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    expires_at = Column(UTCDateTime, nullable=False, index=True)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)

    user = relationship("User")

    def __repr__(self) -> str:
        return f"<UserSession(user_id={self.user_id}, expires_at={self.expires_at})>"
