"""
The five verifiable record kinds.

Each kind describes where its records live, how its verification substate is
stored (inline or in a joined row), which records are reviewable, and its
natural ordering. Scope and status filtering are applied by the engine on top
of ``select_records`` in the same way for every kind.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import ColumnElement, Select, func, select, true, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from practicum.engines.verification.types import (
    RecordKind,
    ReviewerRef,
    VerifiableRecordView,
    VerificationState,
)
from practicum.kernel.models.base import generate_uuid
from practicum.kernel.models.records import (
    Activity,
    ActivityStatus,
    Competency,
    ProfileDocument,
    Qualification,
    SessionStatus,
    StudentCompetency,
    TeachingSession,
)
from practicum.kernel.models.user import User
from practicum.kernel.models.verification import (
    ActivityVerification,
    CompetencyVerification,
    ProfileVerification,
    SessionVerification,
    VerificationStatus,
)


@dataclass
class KindQuery:
    """A select over one kind, with handles on the columns filters need."""

    query: Select
    status: ColumnElement
    owner: Any  # aliased User


class VerifiableKind:
    """
    Base for one record kind.

    Subclasses set ``model`` and, for kinds whose substate lives in a joined
    row, ``verification_model`` and ``link_column``.
    """

    kind: RecordKind
    model: Type[Any]
    verification_model: Optional[Type[Any]] = None
    link_column: Optional[str] = None

    @property
    def owner_column(self):
        return self.model.student_id

    @property
    def stores_inline(self) -> bool:
        return self.verification_model is None

    def reviewable(self) -> ColumnElement[bool]:
        """Records outside this predicate are invisible to the workflow."""
        return true()

    def order_by(self, owner) -> List[ColumnElement]:
        raise NotImplementedError

    def extra_columns(self) -> List[ColumnElement]:
        return []

    def join_extra(self, query: Select) -> Select:
        return query

    def _state_columns(self):
        if self.stores_inline:
            return (
                self.model.verification_status,
                self.model.verified_by,
                self.model.feedback,
            )
        v = self.verification_model
        # No joined row means nobody has reviewed the record yet
        return (
            func.coalesce(v.verification_status, VerificationStatus.PENDING.value),
            v.verified_by,
            v.feedback,
        )

    def select_records(self, *columns) -> KindQuery:
        """
        Select this kind's records joined to owner and reviewer.

        With no ``columns`` the full row needed by ``to_view`` is selected;
        otherwise only ``columns`` (e.g. a count) over the same joins.
        """
        owner = aliased(User, name="owner")
        reviewer = aliased(User, name="reviewer")
        status, reviewer_id, feedback = self._state_columns()

        if columns:
            query = select(*columns).select_from(self.model)
        else:
            query = select(
                self.model,
                owner.full_name.label("owner_name"),
                owner.email.label("owner_email"),
                status.label("status"),
                reviewer_id.label("reviewer_id"),
                reviewer.full_name.label("reviewer_name"),
                feedback.label("feedback"),
                *self.extra_columns(),
            ).select_from(self.model)

        query = query.join(owner, self.owner_column == owner.id)
        if not self.stores_inline:
            v = self.verification_model
            query = query.outerjoin(v, getattr(v, self.link_column) == self.model.id)
        query = query.outerjoin(reviewer, reviewer_id == reviewer.id)
        query = self.join_extra(query)
        query = query.where(self.reviewable())
        return KindQuery(query=query, status=status, owner=owner)

    def to_view(self, row) -> VerifiableRecordView:
        record = row[0]
        reviewer = None
        if row.reviewer_id is not None and row.reviewer_name is not None:
            reviewer = ReviewerRef(id=row.reviewer_id, name=row.reviewer_name)
        return VerifiableRecordView(
            kind=self.kind,
            id=record.id,
            owner_id=record.student_id,
            owner_name=row.owner_name,
            owner_email=row.owner_email,
            title=self.title(record, row),
            occurred_on=self.occurred_on(record),
            verification=VerificationState(
                status=VerificationStatus(row.status),
                reviewer=reviewer,
                feedback=row.feedback,
            ),
            details=self.details(record, row),
        )

    def title(self, record, row) -> str:
        return record.title

    def occurred_on(self, record):
        return None

    def details(self, record, row) -> Dict[str, Any]:
        return {}

    async def write_state(
        self,
        session: AsyncSession,
        record_id: uuid.UUID,
        status: VerificationStatus,
        reviewer_id: Optional[uuid.UUID],
        feedback: Optional[str],
    ) -> None:
        """
        Write status, reviewer and feedback together in one statement.

        Joined kinds create the verification row if it does not exist yet and
        update it in place otherwise.
        """
        values = {
            "verification_status": status.value,
            "verified_by": reviewer_id,
            "feedback": feedback,
        }
        if self.stores_inline:
            await session.execute(
                update(self.model)
                .where(self.model.id == record_id)
                .values(**values, updated_at=func.now())
            )
            return

        v = self.verification_model
        dialect = session.get_bind().dialect.name
        if dialect in ("postgresql", "sqlite"):
            if dialect == "postgresql":
                from sqlalchemy.dialects.postgresql import insert
            else:
                from sqlalchemy.dialects.sqlite import insert
            stmt = insert(v).values(id=generate_uuid(), **{self.link_column: record_id}, **values)
            stmt = stmt.on_conflict_do_update(
                index_elements=[self.link_column],
                set_={**values, "updated_at": func.now()},
            )
            await session.execute(stmt)
            return

        await self._update_or_insert(session, record_id, values)

    async def _update_row(self, session: AsyncSession, record_id: uuid.UUID, values: Dict[str, Any]) -> int:
        v = self.verification_model
        result = await session.execute(
            update(v)
            .where(getattr(v, self.link_column) == record_id)
            .values(**values, updated_at=func.now())
        )
        return result.rowcount

    async def _update_or_insert(self, session: AsyncSession, record_id: uuid.UUID, values: Dict[str, Any]) -> None:
        """Portable create-or-update for dialects without ON CONFLICT."""
        if await self._update_row(session, record_id, values):
            return
        try:
            async with session.begin_nested():
                session.add(self.verification_model(**{self.link_column: record_id}, **values))
        except IntegrityError:
            # Another writer created the row between our UPDATE and INSERT
            await self._update_row(session, record_id, values)

    async def reset_state(self, session: AsyncSession, record_id: uuid.UUID) -> None:
        """Back to pending with no reviewer or feedback. A missing row already is."""
        values = {
            "verification_status": VerificationStatus.PENDING.value,
            "verified_by": None,
            "feedback": None,
            "updated_at": func.now(),
        }
        if self.stores_inline:
            await session.execute(
                update(self.model).where(self.model.id == record_id).values(**values)
            )
        else:
            v = self.verification_model
            await session.execute(
                update(v).where(getattr(v, self.link_column) == record_id).values(**values)
            )


class QualificationKind(VerifiableKind):
    kind = RecordKind.QUALIFICATION
    model = Qualification

    def order_by(self, owner):
        return [Qualification.date_obtained.desc()]

    def occurred_on(self, record):
        return record.date_obtained

    def details(self, record, row):
        return {
            "issuing_organization": record.issuing_organization,
            "qualification_type": record.qualification_type,
            "description": record.description,
            "expiry_date": record.expiry_date,
            "certificate_url": record.certificate_url,
        }


class SessionKind(VerifiableKind):
    kind = RecordKind.SESSION
    model = TeachingSession
    verification_model = SessionVerification
    link_column = "session_id"

    def reviewable(self):
        return TeachingSession.status == SessionStatus.COMPLETED.value

    def order_by(self, owner):
        return [TeachingSession.session_date.desc(), TeachingSession.start_time.desc()]

    def occurred_on(self, record):
        return record.session_date

    def details(self, record, row):
        return {
            "description": record.description,
            "start_time": record.start_time,
            "end_time": record.end_time,
            "location": record.location,
            "session_status": record.status,
            "reflection": record.reflection,
        }


class ActivityKind(VerifiableKind):
    kind = RecordKind.ACTIVITY
    model = Activity
    verification_model = ActivityVerification
    link_column = "activity_id"

    def reviewable(self):
        return Activity.status.in_([ActivityStatus.SUBMITTED.value, ActivityStatus.COMPLETED.value])

    def order_by(self, owner):
        return [Activity.date_completed.desc()]

    def occurred_on(self, record):
        return record.date_completed

    def details(self, record, row):
        return {
            "description": record.description,
            "activity_type": record.activity_type,
            "duration_minutes": record.duration_minutes,
            "evidence_url": record.evidence_url,
            "activity_status": record.status,
        }


class CompetencyKind(VerifiableKind):
    kind = RecordKind.COMPETENCY
    model = StudentCompetency
    verification_model = CompetencyVerification
    link_column = "student_competency_id"

    def extra_columns(self):
        return [
            Competency.id.label("competency_id"),
            Competency.name.label("competency_name"),
            Competency.category.label("competency_category"),
            Competency.description.label("competency_description"),
        ]

    def join_extra(self, query):
        return query.join(Competency, StudentCompetency.competency_id == Competency.id)

    def order_by(self, owner):
        return [Competency.category, Competency.name]

    def title(self, record, row):
        return row.competency_name

    def details(self, record, row):
        return {
            "competency_id": row.competency_id,
            "competency_category": row.competency_category,
            "competency_description": row.competency_description,
            "level": record.level,
            "evidence_url": record.evidence_url,
        }


class ProfileKind(VerifiableKind):
    kind = RecordKind.PROFILE
    model = ProfileDocument
    verification_model = ProfileVerification
    link_column = "profile_document_id"

    def order_by(self, owner):
        return [owner.full_name, ProfileDocument.title]

    def details(self, record, row):
        return {"document_url": record.document_url}


KINDS: Dict[RecordKind, VerifiableKind] = {
    k.kind: k
    for k in (QualificationKind(), SessionKind(), ActivityKind(), CompetencyKind(), ProfileKind())
}


def get_kind(kind: RecordKind) -> VerifiableKind:
    return KINDS[kind]
