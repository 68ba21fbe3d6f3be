"""Job listing endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.dependencies import Employer, JobSeeker, get_lifecycle, get_services
from app.schemas.application import ApplicationActionResponse, ApplicationCreate, ApplicationResponse
from app.schemas.job import JobCreate, JobResponse
from app.services.application_service import ApplicationLifecycle
from app.services.container import ServiceContainer
from app.services.job_service import JobService

router = APIRouter()


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobCreate,
    employer: Employer,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> JobResponse:
    """Create a job listing owned by the calling employer."""
    job = await JobService(db).create_job(employer, job_data)
    return JobResponse.model_validate(job)


@router.get("/{job_id}", response_model=JobResponse, status_code=status.HTTP_200_OK)
async def get_job(
    job_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> JobResponse:
    """
    Get job details by ID.

    Returns 404 if job not found.
    """
    job = await JobService(db).get_job(job_id)
    return JobResponse.model_validate(job)


@router.post(
    "/{job_id}/applications",
    response_model=ApplicationActionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def apply_to_job(
    job_id: UUID,
    application_data: ApplicationCreate,
    applicant: JobSeeker,
    lifecycle: Annotated[ApplicationLifecycle, Depends(get_lifecycle)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> ApplicationActionResponse:
    """
    Apply to a job as the calling job seeker.

    Sends a confirmation SMS to the applicant and an alert to the employer
    once the application is stored.
    """
    submission = await lifecycle.submit_application(applicant, job_id, application_data)
    notification = await services.dispatcher.dispatch_and_report(submission.notifications)
    return ApplicationActionResponse(
        application=ApplicationResponse.model_validate(submission.application),
        notification=notification,
    )
