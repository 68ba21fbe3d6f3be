"""Application lifecycle: submission, guarded status transitions and documents."""

from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    ApplicationNotFound,
    InsufficientPermissions,
    InvalidDocumentKind,
    InvalidTransition,
    JobNotFound,
    NotResourceOwner,
)
from app.core.state_machine import normalize_status, validate_transition
from app.db.types import utcnow
from app.models.application import DOCUMENT_KIND_MAX_LENGTH, Application, ApplicationStatus
from app.models.job import Job
from app.models.user import EMPLOYER_ROLES, JOB_SEEKER_ROLES, User, UserRole
from app.schemas.application import ApplicationCreate, InterviewDetails
from app.services.sms_templates import NotificationEvent, TemplateKind

logger = structlog.get_logger(__name__)


@dataclass
class LifecycleEvent:
    """Emitted exactly once per successful transition."""

    application_id: UUID
    new_status: str
    reason: Optional[str] = None
    recipient_phone: Optional[str] = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_notification(self) -> Optional[NotificationEvent]:
        """The SMS the applicant should receive for this transition, if any."""
        status = self.new_status
        payload = dict(self.context)

        if status in (ApplicationStatus.REVIEWED.value, ApplicationStatus.HIRED.value):
            kind = TemplateKind.STATUS_UPDATE
            payload["status"] = status
        elif status == ApplicationStatus.ADDITIONAL_DOCS_REQUIRED.value:
            kind = TemplateKind.ADDITIONAL_DOCS_REQUIRED
        elif status == ApplicationStatus.INTERVIEW_SCHEDULED.value:
            if payload.get("interview_date"):
                kind = TemplateKind.INTERVIEW_SCHEDULED
            else:
                kind = TemplateKind.STATUS_UPDATE
                payload["status"] = status
        elif status == ApplicationStatus.INTERVIEW_COMPLETED.value:
            kind = TemplateKind.INTERVIEW_COMPLETED
        elif status == ApplicationStatus.NOT_PROCEEDING.value:
            kind = TemplateKind.NOT_PROCEEDING
            payload["reason"] = self.reason
        else:
            return None

        return NotificationEvent(recipient_phone=self.recipient_phone, template_kind=kind, payload=payload)


@dataclass
class TransitionResult:
    application: Application
    previous_status: str
    event: LifecycleEvent

    @property
    def notifications(self) -> list[NotificationEvent]:
        notification = self.event.to_notification()
        return [notification] if notification else []


@dataclass
class SubmissionResult:
    """An application or document submission plus the messages it triggers."""

    application: Application
    notifications: list[NotificationEvent] = field(default_factory=list)


def _document_kind(kind: str) -> str:
    kind = kind.strip()
    if len(kind) > DOCUMENT_KIND_MAX_LENGTH:
        raise InvalidDocumentKind(f"Document kind exceeds {DOCUMENT_KIND_MAX_LENGTH} characters")
    return kind


def _clean_documents(documents: Optional[list[str]]) -> list[str]:
    """Strip, drop blanks and de-duplicate, keeping first-seen order."""
    seen: dict[str, None] = {}
    for kind in documents or []:
        kind = _document_kind(kind)
        if kind:
            seen.setdefault(kind, None)
    return list(seen)


class ApplicationLifecycle:
    """Service for application lifecycle operations."""

    def __init__(self, db: AsyncSession) -> None:
        """Initialize lifecycle service with database session."""
        self.db = db

    async def get_job(self, job_id: UUID) -> Job:
        job = await self.db.get(Job, job_id)
        if job is None:
            raise JobNotFound()
        return job

    async def _load_application(self, application_id: UUID) -> Application:
        # populate_existing forces a fresh read of the authoritative row
        result = await self.db.execute(
            select(Application)
            .where(Application.id == application_id)
            .execution_options(populate_existing=True)
        )
        application = result.scalar_one_or_none()
        if application is None:
            raise ApplicationNotFound()
        return application

    async def _employer_phone(self, job: Job) -> Optional[str]:
        if job.phone:
            return job.phone
        employer = await self.db.get(User, job.employer_id)
        return employer.phone if employer else None

    @staticmethod
    def _require_role(actor: User, allowed: frozenset[str]) -> None:
        if actor.role not in allowed:
            raise InsufficientPermissions(allowed, actor.role)

    @staticmethod
    def _require_job_owner(actor: User, job: Job) -> None:
        if actor.role == UserRole.ADMIN.value:
            return
        if job.employer_id != actor.id:
            raise NotResourceOwner("Not authorized to manage applications for this job")

    async def get_application(self, actor: User, application_id: UUID) -> Application:
        """Fetch an application visible to its applicant, the job owner or an admin."""
        application = await self._load_application(application_id)
        if actor.role == UserRole.ADMIN.value or application.applicant_id == actor.id:
            return application
        job = await self.get_job(application.job_id)
        if job.employer_id != actor.id:
            raise NotResourceOwner("Not authorized to access this application")
        return application

    async def submit_application(
        self, actor: User, job_id: UUID, data: ApplicationCreate
    ) -> SubmissionResult:
        """
        Create an application in the initial ``applied`` status.

        Returns the application plus a confirmation SMS for the applicant and
        an alert for the employer contact.
        """
        self._require_role(actor, JOB_SEEKER_ROLES)
        job = await self.get_job(job_id)
        if not job.is_active:
            raise JobNotFound("Job is not accepting applications")

        application = Application(
            job_id=job.id,
            applicant_id=actor.id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            phone=data.phone,
            cover_letter=data.cover_letter,
            status=ApplicationStatus.APPLIED.value,
            required_documents=[],
            submitted_documents={},
        )
        self.db.add(application)
        await self.db.commit()
        await self.db.refresh(application)

        logger.info("application_submitted", application_id=str(application.id), job_id=str(job.id))

        context = {
            "applicant_name": application.applicant_name,
            "job_title": job.title,
            "company": job.company,
        }
        notifications = [
            NotificationEvent(application.phone, TemplateKind.APPLICATION_RECEIVED, dict(context))
        ]
        employer_phone = await self._employer_phone(job)
        if employer_phone:
            notifications.append(
                NotificationEvent(employer_phone, TemplateKind.EMPLOYER_NEW_APPLICATION, dict(context))
            )
        return SubmissionResult(application=application, notifications=notifications)

    def _transition_values(
        self,
        current: str,
        target: str,
        reason: Optional[str],
        notes: Optional[str],
        required_documents: Optional[list[str]],
        interview: Optional[InterviewDetails],
    ) -> dict[str, Any]:
        values: dict[str, Any] = {"status": target, "updated_at": utcnow()}
        if notes is not None:
            values["notes"] = notes

        if target == ApplicationStatus.NOT_PROCEEDING.value:
            reason = (reason or "").strip()
            if not reason:
                raise InvalidTransition(
                    "A reason is required when not proceeding with an application",
                    current=current,
                    target=target,
                    missing_field="reason",
                )
            values["not_proceeding_reason"] = reason

        elif target == ApplicationStatus.ADDITIONAL_DOCS_REQUIRED.value:
            documents = _clean_documents(required_documents)
            if not documents:
                raise InvalidTransition(
                    "At least one required document must be specified",
                    current=current,
                    target=target,
                    missing_field="required_documents",
                )
            values["required_documents"] = documents

        elif target == ApplicationStatus.INTERVIEW_SCHEDULED.value and interview is not None:
            values.update(
                interview_date=interview.date,
                interview_time=interview.time,
                interview_venue=interview.venue,
                interview_type=interview.type.value,
                interview_notes=interview.notes,
            )
        return values

    async def transition(
        self,
        actor: User,
        application_id: UUID,
        target: ApplicationStatus | str,
        *,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
        required_documents: Optional[list[str]] = None,
        interview: Optional[InterviewDetails] = None,
    ) -> TransitionResult:
        """
        Move an application to ``target``.

        The current status is read from the database here, and the update
        only applies if that status is still in place, so a writer that lost
        a race fails instead of overwriting.

        Raises:
            InsufficientPermissions: actor is not an employer or admin
            ApplicationNotFound / JobNotFound: missing rows
            NotResourceOwner: employer does not own the job
            InvalidTransition: edge not allowed, required field missing, or lost race
        """
        target = target.value if isinstance(target, ApplicationStatus) else target
        self._require_role(actor, EMPLOYER_ROLES)

        application = await self._load_application(application_id)
        job = await self.get_job(application.job_id)
        self._require_job_owner(actor, job)

        stored_status = application.status
        current = normalize_status(stored_status)
        is_valid, error = validate_transition(current, target)
        if not is_valid:
            raise InvalidTransition(error, current=current, target=target)

        values = self._transition_values(current, target, reason, notes, required_documents, interview)

        result = await self.db.execute(
            update(Application)
            .where(Application.id == application.id, Application.status == stored_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self.db.rollback()
            latest = await self._load_application(application_id)
            logger.warning(
                "application_transition_conflict",
                application_id=str(application_id),
                expected=stored_status,
                actual=latest.status,
                target=target,
            )
            raise InvalidTransition(
                f"Application status changed to {latest.status} before this update was applied",
                current=normalize_status(latest.status),
                target=target,
            )
        await self.db.commit()
        application = await self._load_application(application_id)

        logger.info(
            "application_transitioned",
            application_id=str(application.id),
            from_status=current,
            to_status=target,
            actor_id=str(actor.id),
        )

        context: dict[str, Any] = {
            "applicant_name": application.applicant_name,
            "job_title": job.title,
            "company": job.company,
        }
        if target == ApplicationStatus.ADDITIONAL_DOCS_REQUIRED.value:
            context["documents"] = ", ".join(application.required_documents)
        if target == ApplicationStatus.INTERVIEW_SCHEDULED.value and interview is not None:
            context.update(
                interview_date=interview.date.strftime("%A, %B %d, %Y"),
                interview_time=interview.time,
                interview_venue=interview.venue,
                interview_type=interview.type.value,
                interview_notes=interview.notes,
            )

        event = LifecycleEvent(
            application_id=application.id,
            new_status=target,
            reason=application.not_proceeding_reason if target == ApplicationStatus.NOT_PROCEEDING.value else None,
            recipient_phone=application.phone,
            context=context,
        )
        return TransitionResult(application=application, previous_status=current, event=event)

    async def request_documents(
        self,
        actor: User,
        application_id: UUID,
        documents: list[str],
        notes: Optional[str] = None,
    ) -> TransitionResult:
        """Move to ``additional_docs_required`` with the given document list."""
        return await self.transition(
            actor,
            application_id,
            ApplicationStatus.ADDITIONAL_DOCS_REQUIRED,
            notes=notes,
            required_documents=documents,
        )

    async def submit_documents(
        self, actor: User, application_id: UUID, documents: dict[str, str]
    ) -> SubmissionResult:
        """
        Record documents the applicant was asked for.

        Status is left unchanged; the employer moves the application on
        manually after reviewing them. The write only applies while the
        status observed here is still in place.
        """
        self._require_role(actor, JOB_SEEKER_ROLES)
        cleaned: dict[str, str] = {}
        for kind, reference in documents.items():
            kind = _document_kind(kind)
            if not kind:
                raise InvalidDocumentKind("Document kinds must not be blank")
            cleaned[kind] = reference
        if not cleaned:
            raise InvalidDocumentKind("At least one document must be submitted")

        application = await self._load_application(application_id)
        if application.applicant_id != actor.id:
            raise NotResourceOwner("Not authorized to submit documents for this application")

        stored_status = application.status
        current = normalize_status(stored_status)
        if current != ApplicationStatus.ADDITIONAL_DOCS_REQUIRED.value:
            raise InvalidTransition(
                "Documents can only be submitted while additional documents are required",
                current=current,
            )

        job = await self.get_job(application.job_id)
        merged = {**(application.submitted_documents or {}), **cleaned}
        result = await self.db.execute(
            update(Application)
            .where(Application.id == application.id, Application.status == stored_status)
            .values(submitted_documents=merged, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self.db.rollback()
            latest = await self._load_application(application_id)
            logger.warning(
                "document_submission_conflict",
                application_id=str(application_id),
                expected=stored_status,
                actual=latest.status,
            )
            raise InvalidTransition(
                f"Application status changed to {latest.status} before the documents were recorded",
                current=normalize_status(latest.status),
            )
        await self.db.commit()
        application = await self._load_application(application_id)

        logger.info(
            "documents_submitted",
            application_id=str(application.id),
            documents=sorted(cleaned),
        )

        notifications = []
        employer_phone = await self._employer_phone(job)
        if employer_phone:
            notifications.append(
                NotificationEvent(
                    employer_phone,
                    TemplateKind.DOCUMENTS_SUBMITTED,
                    {"applicant_name": application.applicant_name, "job_title": job.title},
                )
            )
        return SubmissionResult(application=application, notifications=notifications)
