"""Job listing schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class JobBase(BaseModel):
    """Base job schema."""

    title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: str | None = Field(None, max_length=255)
    description: str | None = None
    phone: str | None = Field(None, min_length=7, max_length=20)


class JobCreate(JobBase):
    """Schema for creating a job."""

    pass


class JobResponse(JobBase):
    """Schema for job response."""

    id: UUID
    employer_id: UUID
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
