"""Application schemas."""

from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, StringConstraints

from app.models.application import DOCUMENT_KIND_MAX_LENGTH, ApplicationStatus, InterviewType

DocumentKind = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=DOCUMENT_KIND_MAX_LENGTH)
]


class ApplicationCreate(BaseModel):
    """Schema for applying to a job."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=7, max_length=20)
    cover_letter: str | None = None


class InterviewDetails(BaseModel):
    """Interview arrangements recorded when scheduling an interview."""

    date: datetime
    time: str = Field(..., min_length=1, max_length=20)
    venue: str = Field(..., min_length=1)
    type: InterviewType
    notes: str | None = None


class StatusUpdate(BaseModel):
    """
    Request a status transition.

    ``reason`` is required for ``not_proceeding`` and ``required_documents``
    for ``additional_docs_required``; both are checked by the lifecycle.
    """

    status: ApplicationStatus
    notes: str | None = None
    reason: str | None = None
    required_documents: list[DocumentKind] | None = None
    interview: InterviewDetails | None = None


class DocumentRequest(BaseModel):
    """Ask the applicant for additional documents."""

    documents: list[DocumentKind] = Field(..., min_length=1)
    notes: str | None = None


class DocumentSubmission(BaseModel):
    """Documents supplied by the applicant, keyed by kind."""

    documents: dict[DocumentKind, str] = Field(..., min_length=1)


class ApplicationResponse(BaseModel):
    """Schema for application response."""

    id: UUID
    job_id: UUID
    applicant_id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str
    cover_letter: str | None
    status: str
    notes: str | None
    required_documents: list[DocumentKind]
    submitted_documents: dict[DocumentKind, str]
    outstanding_documents: list[DocumentKind]
    interview_date: datetime | None
    interview_time: str | None
    interview_venue: str | None
    interview_type: str | None
    interview_notes: str | None
    not_proceeding_reason: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


NotificationFlag = Literal["delivered", "failed", "skipped"]


class ApplicationActionResponse(BaseModel):
    """Result of a mutating application action.

    ``notification`` is informational; the action succeeded regardless.
    """

    application: ApplicationResponse
    previous_status: str | None = None
    notification: NotificationFlag
