"""User schemas."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.schemas.application import NotificationFlag


class UserBase(BaseModel):
    """Base user schema."""

    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str | None = Field(None, min_length=7, max_length=20)
    company_name: str | None = Field(None, max_length=255)


class UserCreate(UserBase):
    """Schema for self-registration. Admin accounts cannot self-register."""

    password: str = Field(..., min_length=8)
    role: Literal["job_seeker", "employer"] = "job_seeker"


class UserLogin(BaseModel):
    """Schema for user login."""

    email: EmailStr
    password: str


class UserResponse(UserBase):
    """User summary; never includes the password hash."""

    id: UUID
    role: str
    is_verified: bool
    verification_status: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    """Login response: user summary plus a stand-alone bearer token."""

    user: UserResponse
    access_token: str
    token_type: str = "bearer"


class MessageResponse(BaseModel):
    message: str


class VerificationRejection(BaseModel):
    """Optional explanation sent to the employer."""

    reason: str | None = Field(None, max_length=500)


class VerificationActionResponse(BaseModel):
    """Outcome of an admin verification decision."""

    employer: UserResponse
    notification: NotificationFlag
