"""Application status state machine."""

from app.models.application import ApplicationStatus


# Valid state transition matrix
VALID_TRANSITIONS: dict[str, set[str]] = {
    ApplicationStatus.APPLIED.value: {
        ApplicationStatus.REVIEWED.value,
        ApplicationStatus.ADDITIONAL_DOCS_REQUIRED.value,
        ApplicationStatus.INTERVIEW_SCHEDULED.value,
        ApplicationStatus.NOT_PROCEEDING.value,
    },
    ApplicationStatus.REVIEWED.value: {
        ApplicationStatus.ADDITIONAL_DOCS_REQUIRED.value,
        ApplicationStatus.INTERVIEW_SCHEDULED.value,
        ApplicationStatus.NOT_PROCEEDING.value,
    },
    ApplicationStatus.ADDITIONAL_DOCS_REQUIRED.value: {
        ApplicationStatus.INTERVIEW_SCHEDULED.value,
        ApplicationStatus.NOT_PROCEEDING.value,
    },
    ApplicationStatus.INTERVIEW_SCHEDULED.value: {
        ApplicationStatus.INTERVIEW_COMPLETED.value,
        ApplicationStatus.NOT_PROCEEDING.value,
    },
    ApplicationStatus.INTERVIEW_COMPLETED.value: {
        ApplicationStatus.HIRED.value,
        ApplicationStatus.NOT_PROCEEDING.value,
    },
    ApplicationStatus.HIRED.value: set(),  # Terminal state
    ApplicationStatus.NOT_PROCEEDING.value: set(),  # Terminal state
}
VALID_TRANSITIONS[ApplicationStatus.PENDING.value] = VALID_TRANSITIONS[ApplicationStatus.APPLIED.value]

TERMINAL_STATUSES = frozenset(
    status for status, targets in VALID_TRANSITIONS.items() if not targets
)


def normalize_status(status: str) -> str:
    """Map the legacy ``pending`` value onto ``applied``."""
    if status == ApplicationStatus.PENDING.value:
        return ApplicationStatus.APPLIED.value
    return status


def allowed_transitions(current_status: str) -> set[str]:
    """Statuses reachable in one step from ``current_status``."""
    return set(VALID_TRANSITIONS.get(current_status, set()))


def validate_transition(current_status: str, next_status: str) -> tuple[bool, str | None]:
    """
    Validate if a state transition is allowed.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if current_status not in VALID_TRANSITIONS:
        return False, f"Unknown current status: {current_status}"

    if next_status not in VALID_TRANSITIONS:
        return False, f"Unknown next status: {next_status}"

    allowed_next = VALID_TRANSITIONS[current_status]
    if next_status not in allowed_next:
        if not allowed_next:
            return False, f"Application is already {current_status}; no further transitions allowed"
        return (
            False,
            f"Invalid transition from {current_status} to {next_status}. "
            f"Allowed transitions: {', '.join(sorted(allowed_next))}",
        )

    return True, None
