"""
Verification & approval workflow over the five verifiable record kinds.
"""

from practicum.engines.verification.engine import VerificationEngine
from practicum.engines.verification.kinds import KINDS, VerifiableKind, get_kind
from practicum.engines.verification.state_machine import can_transition
from practicum.engines.verification.types import (
    ALL_KINDS,
    PendingCounts,
    RecordKind,
    ReviewerRef,
    VerifiableRecordView,
    VerificationListing,
    VerificationState,
    parse_kind,
    parse_status,
)

__all__ = [
    "VerificationEngine",
    "KINDS",
    "VerifiableKind",
    "get_kind",
    "can_transition",
    "ALL_KINDS",
    "PendingCounts",
    "RecordKind",
    "ReviewerRef",
    "VerifiableRecordView",
    "VerificationListing",
    "VerificationState",
    "parse_kind",
    "parse_status",
]
