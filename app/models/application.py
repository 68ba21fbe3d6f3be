"""Job application model."""

import uuid
from enum import Enum as PyEnum

from sqlalchemy import Column, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.db.types import DialectJSON, UTCDateTime, utcnow


# Longest identifier accepted for a requested or submitted document
DOCUMENT_KIND_MAX_LENGTH = 100


class ApplicationStatus(str, PyEnum):
    """Application review status."""

    APPLIED = "applied"
    PENDING = "pending"  # legacy synonym of APPLIED
    REVIEWED = "reviewed"
    ADDITIONAL_DOCS_REQUIRED = "additional_docs_required"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW_COMPLETED = "interview_completed"
    HIRED = "hired"
    NOT_PROCEEDING = "not_proceeding"


class InterviewType(str, PyEnum):
    """How an interview is held."""

    PHONE = "phone"
    VIDEO = "video"
    IN_PERSON = "in-person"


class Application(Base):
    """A job seeker's application to a job."""

    __tablename__ = "applications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    job_id = Column(Uuid(as_uuid=True), ForeignKey("jobs.id"), nullable=False, index=True)
    applicant_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    cover_letter = Column(Text, nullable=True)
    status = Column(String(50), default=ApplicationStatus.APPLIED.value, nullable=False, index=True)
    notes = Column(Text, nullable=True)
    required_documents = Column(DialectJSON, default=list, nullable=False)
    submitted_documents = Column(DialectJSON, default=dict, nullable=False)
    interview_date = Column(UTCDateTime, nullable=True)
    interview_time = Column(String(20), nullable=True)
    interview_venue = Column(Text, nullable=True)
    interview_type = Column(String(20), nullable=True)
    interview_notes = Column(Text, nullable=True)
    not_proceeding_reason = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False)

    job = relationship("Job", back_populates="applications")
    applicant = relationship("User")

    @property
    def applicant_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def outstanding_documents(self) -> list[str]:
        """Requested documents not yet submitted."""
        submitted = self.submitted_documents or {}
        return [kind for kind in (self.required_documents or []) if kind not in submitted]

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, job_id={self.job_id}, status={self.status})>"
