"""
Kernel Data Models

SQLAlchemy models for users, mentor assignments, the five verifiable record
kinds and their verification substate, and the audit log.
"""

from practicum.kernel.models.base import Base, TimestampMixin, generate_uuid
from practicum.kernel.models.user import User, UserRole
from practicum.kernel.models.assignment import MentorAssignment
from practicum.kernel.models.verification import (
    VerificationStatus,
    SessionVerification,
    ActivityVerification,
    CompetencyVerification,
    ProfileVerification,
)
from practicum.kernel.models.records import (
    Qualification,
    TeachingSession,
    SessionStatus,
    Activity,
    ActivityStatus,
    ActivityType,
    Competency,
    CompetencyLevel,
    StudentCompetency,
    ProfileDocument,
)
from practicum.kernel.models.event_log import EventLog, EventType

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "generate_uuid",
    # User
    "User",
    "UserRole",
    "MentorAssignment",
    # Verification
    "VerificationStatus",
    "SessionVerification",
    "ActivityVerification",
    "CompetencyVerification",
    "ProfileVerification",
    # Records
    "Qualification",
    "TeachingSession",
    "SessionStatus",
    "Activity",
    "ActivityStatus",
    "ActivityType",
    "Competency",
    "CompetencyLevel",
    "StudentCompetency",
    "ProfileDocument",
    # Event Log
    "EventLog",
    "EventType",
]
