"""SMS message templates and the notification event passed to the dispatcher."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class TemplateKind(str, Enum):
    """Kinds of transactional SMS the platform sends."""

    APPLICATION_RECEIVED = "application_received"
    EMPLOYER_NEW_APPLICATION = "employer_new_application"
    STATUS_UPDATE = "status_update"
    ADDITIONAL_DOCS_REQUIRED = "additional_docs_required"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    INTERVIEW_COMPLETED = "interview_completed"
    NOT_PROCEEDING = "not_proceeding"
    DOCUMENTS_SUBMITTED = "documents_submitted"
    EMPLOYER_VERIFIED = "employer_verified"
    EMPLOYER_REJECTED = "employer_rejected"


class DeliveryOutcome(str, Enum):
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass
class NotificationEvent:
    """A single outbound SMS. ``outcome`` is filled in by the dispatcher."""

    recipient_phone: Optional[str]
    template_kind: TemplateKind
    payload: dict[str, Any] = field(default_factory=dict)
    outcome: Optional[DeliveryOutcome] = None


STATUS_MESSAGES = {
    "reviewed": "Your application has been reviewed",
    "interview_scheduled": "You have been selected for an interview",
    "hired": "Congratulations! You have been hired",
}

INTERVIEW_TYPE_LABELS = {
    "in-person": "In-Person",
    "video": "Video Call",
    "phone": "Phone",
}

TEMPLATES = {
    TemplateKind.APPLICATION_RECEIVED: (
        "Hi {applicant_name}! Your application for {job_title} at {company} "
        "has been received. We'll be in touch soon!"
    ),
    TemplateKind.EMPLOYER_NEW_APPLICATION: (
        "New application received from {applicant_name} for {job_title}. "
        "Check your dashboard to review."
    ),
    TemplateKind.ADDITIONAL_DOCS_REQUIRED: (
        "Hi {applicant_name}! Additional documents are required for your application "
        "for {job_title} at {company}: {documents}. Please log in to your account to submit them."
    ),
    TemplateKind.INTERVIEW_COMPLETED: (
        "Hi {applicant_name}! Thank you for attending the interview for {job_title} at {company}. "
        "Your interview status has been updated to completed. "
        "We will notify you about the next steps soon."
    ),
    TemplateKind.NOT_PROCEEDING: (
        "Hi {applicant_name}, thank you for your interest in the {job_title} position at {company}. "
        "After careful consideration, we regret to inform you that we will not be proceeding "
        "with your application.\n\nReason: {reason}\n\n"
        "We appreciate your time and wish you the best in your job search."
    ),
    TemplateKind.DOCUMENTS_SUBMITTED: (
        "{applicant_name} has submitted the requested documents for {job_title}. "
        "Check your dashboard to review."
    ),
    TemplateKind.EMPLOYER_VERIFIED: (
        "Hi {employer_name}! Great news! Your employer verification has been approved. "
        "You can now post jobs and access all features on Pili Jobs. Welcome aboard!"
    ),
}


def _render_status_update(payload: dict[str, Any]) -> str:
    status = payload["status"]
    status_message = STATUS_MESSAGES.get(
        status, f"Your application status has been updated to: {status}"
    )
    return "Hi {applicant_name}! {status_message} for {job_title} at {company}.".format(
        status_message=status_message, **payload
    )


def _render_interview(payload: dict[str, Any]) -> str:
    type_label = INTERVIEW_TYPE_LABELS.get(payload["interview_type"], "Phone")
    notes = payload.get("interview_notes")
    notes_text = f" Notes: {notes}" if notes else ""
    return (
        "Hi {applicant_name}! You have been scheduled for an interview for {job_title} at {company}.\n\n"
        "Date: {interview_date}\nTime: {interview_time}\nType: {type_label}\n"
        "Venue/Link: {interview_venue}{notes_text}\n\nGood luck!"
    ).format(type_label=type_label, notes_text=notes_text, **payload)


def _render_verification_rejected(payload: dict[str, Any]) -> str:
    reason = payload.get("reason")
    reason_text = f" Reason: {reason}." if reason else ""
    return (
        "Hi {employer_name}! Your employer verification request has been reviewed but was not "
        "approved.{reason_text} Please contact support or resubmit your documents with the "
        "required information."
    ).format(reason_text=reason_text, employer_name=payload["employer_name"])


def render(kind: TemplateKind, payload: dict[str, Any]) -> str:
    """
    Render the message text for ``kind``.

    Raises:
        KeyError: If the payload lacks a field the template needs
    """
    if kind is TemplateKind.STATUS_UPDATE:
        return _render_status_update(payload)
    if kind is TemplateKind.INTERVIEW_SCHEDULED:
        return _render_interview(payload)
    if kind is TemplateKind.EMPLOYER_REJECTED:
        return _render_verification_rejected(payload)
    return TEMPLATES[kind].format(**payload)
