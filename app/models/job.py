"""Job listing model."""

import uuid

from sqlalchemy import Boolean, Column, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.db.types import UTCDateTime, utcnow


class Job(Base):
    """Job posting owned by an employer."""

    __tablename__ = "jobs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    employer_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    # Contact number for application alerts; falls back to the employer's phone
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)

    employer = relationship("User", backref="jobs")
    applications = relationship("Application", back_populates="job")

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title={self.title}, employer_id={self.employer_id})>"
