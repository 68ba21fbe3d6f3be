"""Application review endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.dependencies import CurrentUser, Employer, JobSeeker, get_lifecycle, get_services
from app.schemas.application import (
    ApplicationActionResponse,
    ApplicationResponse,
    DocumentRequest,
    DocumentSubmission,
    StatusUpdate,
)
from app.services.application_service import ApplicationLifecycle, TransitionResult
from app.services.container import ServiceContainer

router = APIRouter()


async def _respond(result: TransitionResult, services: ServiceContainer) -> ApplicationActionResponse:
    # The transition is already committed; delivery only sets the flag
    notification = await services.dispatcher.dispatch_and_report(result.notifications)
    return ApplicationActionResponse(
        application=ApplicationResponse.model_validate(result.application),
        previous_status=result.previous_status,
        notification=notification,
    )


@router.get("/{application_id}", response_model=ApplicationResponse, status_code=status.HTTP_200_OK)
async def get_application(
    application_id: UUID,
    current_user: CurrentUser,
    lifecycle: Annotated[ApplicationLifecycle, Depends(get_lifecycle)],
) -> ApplicationResponse:
    """
    Get an application.

    Visible to the applicant, the employer who owns the job, and admins.
    """
    application = await lifecycle.get_application(current_user, application_id)
    return ApplicationResponse.model_validate(application)


@router.patch(
    "/{application_id}/status",
    response_model=ApplicationActionResponse,
    status_code=status.HTTP_200_OK,
)
async def update_application_status(
    application_id: UUID,
    update: StatusUpdate,
    employer: Employer,
    lifecycle: Annotated[ApplicationLifecycle, Depends(get_lifecycle)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> ApplicationActionResponse:
    """
    Move an application to a new status.

    - **status**: Target status; must be reachable from the current one
    - **reason**: Required for `not_proceeding`
    - **required_documents**: Required for `additional_docs_required`
    - **interview**: Optional interview details for `interview_scheduled`

    Returns 409 for a disallowed transition and 400 when a required field is missing.
    """
    result = await lifecycle.transition(
        employer,
        application_id,
        update.status,
        reason=update.reason,
        notes=update.notes,
        required_documents=update.required_documents,
        interview=update.interview,
    )
    return await _respond(result, services)


@router.post(
    "/{application_id}/document-request",
    response_model=ApplicationActionResponse,
    status_code=status.HTTP_200_OK,
)
async def request_documents(
    application_id: UUID,
    document_request: DocumentRequest,
    employer: Employer,
    lifecycle: Annotated[ApplicationLifecycle, Depends(get_lifecycle)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> ApplicationActionResponse:
    """Ask the applicant for additional documents."""
    result = await lifecycle.request_documents(
        employer, application_id, document_request.documents, notes=document_request.notes
    )
    return await _respond(result, services)


@router.post(
    "/{application_id}/documents",
    response_model=ApplicationActionResponse,
    status_code=status.HTTP_200_OK,
)
async def submit_documents(
    application_id: UUID,
    submission: DocumentSubmission,
    applicant: JobSeeker,
    lifecycle: Annotated[ApplicationLifecycle, Depends(get_lifecycle)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> ApplicationActionResponse:
    """
    Submit requested documents.

    The status does not change; the employer reviews and moves the
    application on.
    """
    result = await lifecycle.submit_documents(applicant, application_id, submission.documents)
    notification = await services.dispatcher.dispatch_and_report(result.notifications)
    return ApplicationActionResponse(
        application=ApplicationResponse.model_validate(result.application),
        notification=notification,
    )
