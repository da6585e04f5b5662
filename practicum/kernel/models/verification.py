"""
Verification substate storage.

Qualifications keep their substate inline (see records.py). Sessions,
activities, competency ratings and profile documents keep it in a separate
row joined one-to-one on the record; a record without a row is pending.
"""

import uuid
from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from practicum.kernel.models.base import Base, TimestampMixin, generate_uuid


class VerificationStatus(str, Enum):
    """Three-state approval lifecycle."""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class VerificationStateMixin(TimestampMixin):
    """The {status, reviewer, feedback} tuple shared by every joined table."""

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=generate_uuid,
    )
    verification_status: Mapped[VerificationStatus] = mapped_column(
        String(20),
        default=VerificationStatus.PENDING,
        nullable=False,
        index=True,
    )
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    @declared_attr
    def verified_by(cls) -> Mapped[Optional[uuid.UUID]]:
        # A removed reviewer leaves the decision in place with no name attached
        return mapped_column(
            ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        )


class SessionVerification(Base, VerificationStateMixin):
    __tablename__ = "session_verifications"

    session_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("teaching_sessions.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )


class ActivityVerification(Base, VerificationStateMixin):
    __tablename__ = "activity_verifications"

    activity_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )


class CompetencyVerification(Base, VerificationStateMixin):
    __tablename__ = "competency_verifications"

    student_competency_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("student_competencies.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )


class ProfileVerification(Base, VerificationStateMixin):
    __tablename__ = "profile_verifications"

    profile_document_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("profile_documents.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
