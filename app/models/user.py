"""User model."""

import uuid
from enum import Enum as PyEnum

from sqlalchemy import Boolean, Column, String, Uuid

from app.db.base import Base
from app.db.types import UTCDateTime, utcnow


class UserRole(str, PyEnum):
    """Roles recognised by the access guard."""

    JOB_SEEKER = "job_seeker"
    EMPLOYER = "employer"
    ADMIN = "admin"


class VerificationStatus(str, PyEnum):
    """Admin review state of an employer account."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class User(Base):
    """Platform account: job seeker, employer or administrator."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.JOB_SEEKER.value)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), unique=True, nullable=True)
    company_name = Column(String(255), nullable=True)
    # Only meaningful for employers; written by the admin verification review
    is_verified = Column(Boolean, default=False, nullable=False)
    verification_status = Column(String(20), default=VerificationStatus.PENDING.value, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


JOB_SEEKER_ROLES = frozenset({UserRole.JOB_SEEKER.value})
EMPLOYER_ROLES = frozenset({UserRole.EMPLOYER.value, UserRole.ADMIN.value})
ADMIN_ROLES = frozenset({UserRole.ADMIN.value})
