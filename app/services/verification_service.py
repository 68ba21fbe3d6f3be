"""Admin review of employer accounts."""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InsufficientPermissions, UserNotFound
from app.db.types import utcnow
from app.models.user import ADMIN_ROLES, User, UserRole, VerificationStatus
from app.services.sms_templates import NotificationEvent, TemplateKind

logger = structlog.get_logger(__name__)


@dataclass
class VerificationResult:
    employer: User
    notifications: list[NotificationEvent] = field(default_factory=list)


class EmployerVerification:
    """Approves or rejects employer accounts and builds the SMS for each decision."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_pending(self) -> list[User]:
        """Employers still waiting for a decision, oldest first."""
        result = await self.db.execute(
            select(User)
            .where(
                User.role == UserRole.EMPLOYER.value,
                User.verification_status == VerificationStatus.PENDING.value,
            )
            .order_by(User.created_at)
        )
        return list(result.scalars().all())

    async def _load_employer(self, user_id: UUID) -> User:
        employer = await self.db.get(User, user_id)
        if employer is None or employer.role != UserRole.EMPLOYER.value:
            raise UserNotFound("Employer not found")
        return employer

    async def _decide(
        self,
        admin: User,
        user_id: UUID,
        decision: VerificationStatus,
        reason: Optional[str] = None,
    ) -> VerificationResult:
        if admin.role not in ADMIN_ROLES:
            raise InsufficientPermissions(ADMIN_ROLES, admin.role)

        employer = await self._load_employer(user_id)
        employer.verification_status = decision.value
        employer.is_verified = decision is VerificationStatus.APPROVED
        employer.updated_at = utcnow()
        await self.db.commit()
        await self.db.refresh(employer)

        logger.info(
            "employer_verification_decided",
            employer_id=str(employer.id),
            decision=decision.value,
            admin_id=str(admin.id),
        )

        if not employer.phone:
            logger.info("employer_verification_sms_skipped", employer_id=str(employer.id))
            return VerificationResult(employer=employer)

        payload = {"employer_name": employer.full_name or employer.email}
        if decision is VerificationStatus.APPROVED:
            kind = TemplateKind.EMPLOYER_VERIFIED
        else:
            kind = TemplateKind.EMPLOYER_REJECTED
            payload["reason"] = reason
        return VerificationResult(
            employer=employer,
            notifications=[NotificationEvent(employer.phone, kind, payload)],
        )

    async def approve(self, admin: User, user_id: UUID) -> VerificationResult:
        return await self._decide(admin, user_id, VerificationStatus.APPROVED)

    async def reject(self, admin: User, user_id: UUID, reason: Optional[str] = None) -> VerificationResult:
        """Reject an employer; ``reason`` is included in the SMS when given."""
        reason = (reason or "").strip() or None
        return await self._decide(admin, user_id, VerificationStatus.REJECTED, reason)
