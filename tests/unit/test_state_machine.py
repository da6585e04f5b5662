"""Unit tests for the verification lifecycle rules."""

import pytest

from practicum.engines.verification.state_machine import (
    can_transition,
    is_terminal,
    normalize_feedback,
)
from practicum.kernel.errors import ValidationError
from practicum.kernel.models.user import UserRole
from practicum.kernel.models.verification import VerificationStatus

PENDING = VerificationStatus.PENDING
VERIFIED = VerificationStatus.VERIFIED
REJECTED = VerificationStatus.REJECTED


class TestTransitions:

    @pytest.mark.parametrize("role", [UserRole.MENTOR, UserRole.ADMIN])
    @pytest.mark.parametrize("from_status", list(VerificationStatus))
    @pytest.mark.parametrize("to_status", list(VerificationStatus))
    def test_reviewers_may_move_anywhere(self, role, from_status, to_status):
        assert can_transition(role, from_status, to_status)

    def test_students_only_reopen(self):
        assert can_transition(UserRole.STUDENT, VERIFIED, PENDING)
        assert can_transition(UserRole.STUDENT, REJECTED, PENDING)
        assert not can_transition(UserRole.STUDENT, PENDING, VERIFIED)
        assert not can_transition(UserRole.STUDENT, PENDING, REJECTED)
        assert not can_transition(UserRole.STUDENT, REJECTED, VERIFIED)

    def test_terminal_statuses(self):
        assert is_terminal(VERIFIED)
        assert is_terminal(REJECTED)
        assert not is_terminal(PENDING)


class TestFeedback:

    def test_rejection_requires_feedback(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_feedback(REJECTED, None)
        assert exc_info.value.field == "feedback"

    def test_whitespace_feedback_counts_as_missing(self):
        with pytest.raises(ValidationError):
            normalize_feedback(REJECTED, "   \n")

    def test_feedback_is_stripped(self):
        assert normalize_feedback(REJECTED, "  needs a signature  ") == "needs a signature"

    def test_feedback_optional_otherwise(self):
        assert normalize_feedback(VERIFIED, None) is None
        assert normalize_feedback(PENDING, "") is None
        assert normalize_feedback(VERIFIED, "Great work") == "Great work"
