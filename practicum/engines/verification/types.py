"""
Value types returned by the verification engine.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional

from practicum.kernel.errors import ValidationError
from practicum.kernel.models.verification import VerificationStatus


class RecordKind(str, Enum):
    """The five record kinds subject to the approval workflow."""
    QUALIFICATION = "qualification"
    SESSION = "session"
    ACTIVITY = "activity"
    COMPETENCY = "competency"
    PROFILE = "profile"


ALL_KINDS = "all"

# URLs and older clients use the plural collection names
_KIND_ALIASES = {
    "qualifications": RecordKind.QUALIFICATION,
    "sessions": RecordKind.SESSION,
    "activities": RecordKind.ACTIVITY,
    "competencies": RecordKind.COMPETENCY,
    "profiles": RecordKind.PROFILE,
}


def parse_kind(value: str) -> RecordKind:
    """
    Parse a record kind from its singular or plural name.

    Raises:
        ValidationError: For an unknown kind
    """
    normalized = (value or "").strip().lower()
    if normalized in _KIND_ALIASES:
        return _KIND_ALIASES[normalized]
    try:
        return RecordKind(normalized)
    except ValueError:
        raise ValidationError(f"Unknown record kind: {value!r}", field="kind") from None


def parse_kinds(value: Optional[str]) -> List[RecordKind]:
    """``None`` or ``"all"`` selects every kind."""
    if value is None or value.strip().lower() == ALL_KINDS:
        return list(RecordKind)
    return [parse_kind(value)]


def parse_status(value: Any) -> VerificationStatus:
    """
    Raises:
        ValidationError: For anything other than pending/verified/rejected
    """
    if isinstance(value, VerificationStatus):
        return value
    try:
        return VerificationStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            f"Invalid status {value!r}; expected one of pending, verified, rejected",
            field="status",
        ) from None


@dataclass(frozen=True)
class ReviewerRef:
    id: uuid.UUID
    name: str


@dataclass
class VerificationState:
    """
    Current verification substate of a record.

    ``reviewer`` is None while pending, and also when the reviewer's user row
    can no longer be resolved.
    """

    status: VerificationStatus
    reviewer: Optional[ReviewerRef] = None
    feedback: Optional[str] = None


@dataclass
class VerifiableRecordView:
    """A record of any kind, flattened for review screens."""

    kind: RecordKind
    id: uuid.UUID
    owner_id: uuid.UUID
    owner_name: str
    owner_email: str
    title: str
    occurred_on: Optional[date]
    verification: VerificationState
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> VerificationStatus:
        return self.verification.status


@dataclass
class PendingCounts:
    by_kind: Dict[RecordKind, int]

    @property
    def total(self) -> int:
        return sum(self.by_kind.values())


@dataclass
class VerificationListing:
    """Per-kind record lists plus the actor's outstanding work."""

    records: Dict[RecordKind, List[VerifiableRecordView]]
    counts: PendingCounts
