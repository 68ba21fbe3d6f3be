"""Tests for database models."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from app.models.application import Application
from app.models.user import User, UserRole, VerificationStatus
from app.models.user_session import UserSession


@pytest.mark.asyncio
async def test_user_creation(db_session):
    """Test user model creation."""
    user = User(
        email="test@example.com",
        password_hash="hashed_password",
        role=UserRole.EMPLOYER.value,
        first_name="Test",
        last_name="User",
        company_name="Pili Logistics",
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)

    assert user.id is not None
    assert user.full_name == "Test User"
    assert user.is_active is True
    assert user.is_verified is False
    assert user.verification_status == VerificationStatus.PENDING.value
    assert user.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_user_email_is_unique(db_session, job_seeker):
    db_session.add(
        User(
            email=job_seeker.email,
            password_hash="x",
            role=UserRole.JOB_SEEKER.value,
            first_name="Copy",
            last_name="Cat",
        )
    )
    with pytest.raises(IntegrityError):
        await db_session.commit()
    await db_session.rollback()


@pytest.mark.asyncio
async def test_job_defaults(job, employer):
    assert job.is_active is True
    assert job.employer_id == employer.id
    assert job.created_at is not None


@pytest.mark.asyncio
async def test_application_documents(db_session, application):
    application.required_documents = ["Resume", "NBI Clearance"]
    application.submitted_documents = {"Resume": "https://files.example.com/resume.pdf"}
    await db_session.commit()
    await db_session.refresh(application)

    assert application.applicant_name == "Juan Dela Cruz"
    assert application.outstanding_documents == ["NBI Clearance"]


@pytest.mark.asyncio
async def test_application_interview_date_is_utc(db_session, application):
    manila = timezone(timedelta(hours=8))
    application.interview_date = datetime(2026, 3, 2, 18, 0, tzinfo=manila)
    await db_session.commit()
    await db_session.refresh(application)

    assert application.interview_date == datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_session_expiry_round_trips_as_aware(db_session, job_seeker):
    expires = datetime.now(timezone.utc) + timedelta(days=7)
    session = UserSession(id="abc123", user_id=job_seeker.id, expires_at=expires)
    db_session.add(session)
    await db_session.commit()
    await db_session.refresh(session)

    assert session.expires_at.tzinfo is not None
    assert abs(session.expires_at - expires) < timedelta(seconds=1)


def test_application_defaults_without_database():
    application = Application(first_name="Ana", last_name="Reyes")
    assert application.outstanding_documents == []
