"""
Student-owned portfolio records subject to the approval workflow.

Every record has an immutable ``student_id`` owner. Which rows a reviewer
sees, and in what order, is decided by the verification engine, not here.
"""

import uuid
from datetime import date, time
from enum import Enum
from typing import Optional

from sqlalchemy import Date, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import Mapped, mapped_column

from practicum.kernel.models.base import Base, TimestampMixin, generate_uuid
from practicum.kernel.models.verification import VerificationStatus


class SessionStatus(str, Enum):
    PLANNED = "planned"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ActivityStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    COMPLETED = "completed"


class ActivityType(str, Enum):
    WORKSHOP = "workshop"
    RESEARCH = "research"
    PROJECT = "project"
    COURSEWORK = "coursework"
    OTHER = "other"


class CompetencyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class Qualification(Base, TimestampMixin):
    """
    A certificate or degree held by a student.

    The verification substate lives on the row itself.
    """

    __tablename__ = "qualifications"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    issuing_organization: Mapped[str] = mapped_column(String(255), nullable=False)
    qualification_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    date_obtained: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    certificate_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    verification_status: Mapped[VerificationStatus] = mapped_column(
        String(20),
        default=VerificationStatus.PENDING,
        nullable=False,
        index=True,
    )
    verified_by: Mapped[Optional[uuid.UUID]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Qualification {self.title!r} student={self.student_id}>"


class TeachingSession(Base, TimestampMixin):
    """A logged teaching session. Only completed sessions are reviewed."""

    __tablename__ = "teaching_sessions"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    session_date: Mapped[date] = mapped_column(Date, nullable=False)
    start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    status: Mapped[SessionStatus] = mapped_column(
        String(20),
        default=SessionStatus.PLANNED,
        nullable=False,
    )
    reflection: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<TeachingSession {self.title!r} {self.session_date}>"


class Activity(Base, TimestampMixin):
    """A professional-development activity. Drafts are not reviewed."""

    __tablename__ = "activities"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    activity_type: Mapped[ActivityType] = mapped_column(String(30), nullable=False)
    date_completed: Mapped[date] = mapped_column(Date, nullable=False)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    evidence_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[ActivityStatus] = mapped_column(
        String(20),
        default=ActivityStatus.DRAFT,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Activity {self.title!r} {self.date_completed}>"


class Competency(Base, TimestampMixin):
    """Catalog entry that students rate themselves against."""

    __tablename__ = "competencies"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class StudentCompetency(Base, TimestampMixin):
    """A student's self-rating against one competency."""

    __tablename__ = "student_competencies"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    competency_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("competencies.id", ondelete="CASCADE"),
        nullable=False,
    )
    level: Mapped[CompetencyLevel] = mapped_column(String(20), nullable=False)
    evidence_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class ProfileDocument(Base, TimestampMixin):
    """An identity or credential document attached to a student profile."""

    __tablename__ = "profile_documents"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=generate_uuid)
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    document_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
