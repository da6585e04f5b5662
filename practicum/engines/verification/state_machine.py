"""
Verification lifecycle: valid transitions and who may trigger them.

Reviewers (mentors, admins) move records between all three states through the
engine. Students only ever move their own records back to pending, and only
by editing them through the record service.
"""

from typing import Dict, Optional, Set, Tuple

from practicum.kernel.errors import ValidationError
from practicum.kernel.models.user import UserRole
from practicum.kernel.models.verification import VerificationStatus

PENDING = VerificationStatus.PENDING
VERIFIED = VerificationStatus.VERIFIED
REJECTED = VerificationStatus.REJECTED

_REVIEWERS: Set[UserRole] = {UserRole.MENTOR, UserRole.ADMIN}

# (from_status, to_status) -> roles that may trigger
_TRANSITIONS: Dict[Tuple[VerificationStatus, VerificationStatus], Set[UserRole]] = {
    # Review
    (PENDING, VERIFIED): _REVIEWERS,
    (PENDING, REJECTED): _REVIEWERS,
    # Revision of an earlier decision
    (VERIFIED, REJECTED): _REVIEWERS,
    (REJECTED, VERIFIED): _REVIEWERS,
    (VERIFIED, PENDING): _REVIEWERS | {UserRole.STUDENT},
    (REJECTED, PENDING): _REVIEWERS | {UserRole.STUDENT},
    # Re-recording a decision, e.g. with new feedback
    (PENDING, PENDING): _REVIEWERS,
    (VERIFIED, VERIFIED): _REVIEWERS,
    (REJECTED, REJECTED): _REVIEWERS,
}


def can_transition(
    actor_role: UserRole,
    from_status: VerificationStatus,
    to_status: VerificationStatus,
) -> bool:
    """Check if an actor with the given role may move from_status -> to_status."""
    return actor_role in _TRANSITIONS.get((from_status, to_status), set())


def is_terminal(status: VerificationStatus) -> bool:
    return status in (VERIFIED, REJECTED)


def normalize_feedback(status: VerificationStatus, feedback: Optional[str]) -> Optional[str]:
    """
    Blank feedback is no feedback.

    Raises:
        ValidationError: If a rejection carries no feedback
    """
    text = feedback.strip() if feedback else None
    if not text:
        text = None
    if status == REJECTED and text is None:
        raise ValidationError("Feedback is required when rejecting", field="feedback")
    return text
