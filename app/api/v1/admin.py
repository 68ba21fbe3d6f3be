"""Admin endpoints for employer verification."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, status

from app.dependencies import Admin, get_services, get_verification
from app.schemas.user import UserResponse, VerificationActionResponse, VerificationRejection
from app.services.container import ServiceContainer
from app.services.verification_service import EmployerVerification, VerificationResult

router = APIRouter()


async def _respond(result: VerificationResult, services: ServiceContainer) -> VerificationActionResponse:
    notification = await services.dispatcher.dispatch_and_report(result.notifications)
    return VerificationActionResponse(
        employer=UserResponse.model_validate(result.employer),
        notification=notification,
    )


@router.get(
    "/verification-requests",
    response_model=list[UserResponse],
    status_code=status.HTTP_200_OK,
)
async def list_verification_requests(
    admin: Admin,
    verification: Annotated[EmployerVerification, Depends(get_verification)],
) -> list[UserResponse]:
    """Employers awaiting a verification decision."""
    employers = await verification.list_pending()
    return [UserResponse.model_validate(employer) for employer in employers]


@router.post(
    "/verification/{user_id}/approve",
    response_model=VerificationActionResponse,
    status_code=status.HTTP_200_OK,
)
async def approve_employer(
    user_id: UUID,
    admin: Admin,
    verification: Annotated[EmployerVerification, Depends(get_verification)],
    services: Annotated[ServiceContainer, Depends(get_services)],
) -> VerificationActionResponse:
    """Mark an employer as verified and notify them by SMS."""
    result = await verification.approve(admin, user_id)
    return await _respond(result, services)


@router.post(
    "/verification/{user_id}/reject",
    response_model=VerificationActionResponse,
    status_code=status.HTTP_200_OK,
)
async def reject_employer(
    user_id: UUID,
    admin: Admin,
    verification: Annotated[EmployerVerification, Depends(get_verification)],
    services: Annotated[ServiceContainer, Depends(get_services)],
    rejection: Annotated[VerificationRejection | None, Body()] = None,
) -> VerificationActionResponse:
    """
    Reject an employer's verification request.

    - **reason**: Optional explanation included in the SMS
    """
    reason = rejection.reason if rejection else None
    result = await verification.reject(admin, user_id, reason)
    return await _respond(result, services)
