"""Tests for the application status state machine."""

import pytest

from app.core.state_machine import (
    TERMINAL_STATUSES,
    VALID_TRANSITIONS,
    allowed_transitions,
    normalize_status,
    validate_transition,
)
from app.models.application import ApplicationStatus

S = ApplicationStatus

EXPECTED_EDGES = {
    (S.APPLIED, S.REVIEWED),
    (S.APPLIED, S.ADDITIONAL_DOCS_REQUIRED),
    (S.APPLIED, S.INTERVIEW_SCHEDULED),
    (S.APPLIED, S.NOT_PROCEEDING),
    (S.REVIEWED, S.ADDITIONAL_DOCS_REQUIRED),
    (S.REVIEWED, S.INTERVIEW_SCHEDULED),
    (S.REVIEWED, S.NOT_PROCEEDING),
    (S.ADDITIONAL_DOCS_REQUIRED, S.INTERVIEW_SCHEDULED),
    (S.ADDITIONAL_DOCS_REQUIRED, S.NOT_PROCEEDING),
    (S.INTERVIEW_SCHEDULED, S.INTERVIEW_COMPLETED),
    (S.INTERVIEW_SCHEDULED, S.NOT_PROCEEDING),
    (S.INTERVIEW_COMPLETED, S.HIRED),
    (S.INTERVIEW_COMPLETED, S.NOT_PROCEEDING),
}

CANONICAL = [status for status in S if status is not S.PENDING]


@pytest.mark.parametrize("current", CANONICAL)
@pytest.mark.parametrize("target", CANONICAL)
def test_transition_table(current, target):
    """Every pair of canonical statuses is accepted exactly when it is a listed edge."""
    is_valid, error = validate_transition(current.value, target.value)
    if (current, target) in EXPECTED_EDGES:
        assert is_valid is True
        assert error is None
    else:
        assert is_valid is False
        assert error


def test_terminal_statuses():
    assert TERMINAL_STATUSES == {S.HIRED.value, S.NOT_PROCEEDING.value}
    is_valid, error = validate_transition(S.HIRED.value, S.REVIEWED.value)
    assert is_valid is False
    assert "no further transitions" in error


def test_no_self_transitions():
    for status in VALID_TRANSITIONS:
        assert status not in VALID_TRANSITIONS[status]


def test_pending_behaves_like_applied():
    assert normalize_status("pending") == "applied"
    assert normalize_status("reviewed") == "reviewed"
    assert allowed_transitions("pending") == allowed_transitions("applied")
    assert validate_transition("pending", "reviewed") == (True, None)


def test_unknown_statuses():
    is_valid, error = validate_transition("archived", "reviewed")
    assert is_valid is False
    assert "Unknown current status" in error

    is_valid, error = validate_transition("applied", "archived")
    assert is_valid is False
    assert "Unknown next status" in error


def test_error_lists_allowed_targets():
    is_valid, error = validate_transition("applied", "hired")
    assert is_valid is False
    assert "interview_scheduled" in error
    assert "reviewed" in error
