"""
Verification & approval engine.

One code path serves all five record kinds:
- resolve the actor's owner scope,
- apply it (and any owner/status filters) to each kind's query,
- count pending work with the very same filter builder,
- apply status transitions as a single write plus an audit event.
"""

import uuid
from typing import List, Optional, Union

from sqlalchemy import Select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from practicum.engines.verification.kinds import KindQuery, VerifiableKind, get_kind
from practicum.engines.verification.state_machine import (
    can_transition,
    is_terminal,
    normalize_feedback,
)
from practicum.engines.verification.types import (
    PendingCounts,
    RecordKind,
    VerifiableRecordView,
    VerificationListing,
    parse_kind,
    parse_kinds,
    parse_status,
)
from practicum.kernel.errors import Forbidden, NotFound, StoreFailure, Unauthenticated
from practicum.kernel.events.event_store import EventStore
from practicum.kernel.identity.actor import Actor
from practicum.kernel.models.event_log import EventLog, EventType
from practicum.kernel.models.verification import VerificationStatus
from practicum.kernel.permissions.scope import OwnerScope, resolve_scope
from practicum.logging_config import get_logger

logger = get_logger(__name__)

KindArg = Union[RecordKind, str]


class VerificationEngine:
    """
    Role-scoped listing, counting and review of verifiable records.

    The actor is always passed in explicitly. Every call resolves scope
    afresh, so assignment changes take effect on the next call.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.event_store = EventStore(session)

    # Read path

    async def list_verifiable(
        self,
        actor: Optional[Actor],
        kind: Optional[KindArg] = None,
        status: Optional[Union[VerificationStatus, str]] = None,
        owner_id: Optional[uuid.UUID] = None,
    ) -> VerificationListing:
        """
        List the records an actor may see, one list per requested kind.

        Args:
            actor: Who is asking
            kind: A single kind, or None/"all" for every kind
            status: Exact match on the effective verification status
            owner_id: Restrict to one student; must lie within scope

        Returns:
            The per-kind lists and the actor's pending counts. Counts ignore
            ``status`` and ``owner_id``: they measure outstanding work.

        Raises:
            Unauthenticated, Forbidden, ValidationError, StoreFailure
        """
        scope = await self._scope(actor)
        kinds = [kind] if isinstance(kind, RecordKind) else parse_kinds(kind)
        status_filter = parse_status(status) if status is not None else None
        listed = scope.narrow(owner_id)

        records = {}
        for k in kinds:
            records[k] = await self._fetch(get_kind(k), listed, status_filter)

        counts = await self._count_pending(scope)
        return VerificationListing(records=records, counts=counts)

    async def count_pending(self, actor: Optional[Actor]) -> PendingCounts:
        """Pending records per kind within the actor's scope."""
        scope = await self._scope(actor)
        return await self._count_pending(scope)

    async def get_record(
        self,
        actor: Optional[Actor],
        kind: KindArg,
        record_id: uuid.UUID,
    ) -> VerifiableRecordView:
        """
        Raises:
            NotFound: If no reviewable record of this kind has the id
            Forbidden: If it exists but lies outside the actor's scope
        """
        scope = await self._scope(actor)
        vk = get_kind(self._one_kind(kind))
        view = await self._load(vk, record_id)
        if view is None:
            raise NotFound(f"{vk.kind.value.capitalize()} not found")
        if not scope.permits(view.owner_id):
            raise Forbidden("Record belongs to a student outside your scope")
        return view

    async def record_history(
        self,
        actor: Optional[Actor],
        kind: KindArg,
        record_id: uuid.UUID,
    ) -> List[EventLog]:
        """Audit events for one record, newest first, under get_record's access rules."""
        view = await self.get_record(actor, kind, record_id)
        try:
            return await self.event_store.get_entity_history(
                entity_type=view.kind.value,
                entity_id=record_id,
                event_types=[EventType.VERIFICATION_STATUS_CHANGED, EventType.VERIFICATION_RESET],
            )
        except SQLAlchemyError as exc:
            raise StoreFailure("Could not read verification history") from exc

    # Write path

    async def set_status(
        self,
        actor: Optional[Actor],
        kind: KindArg,
        record_id: uuid.UUID,
        status: Union[VerificationStatus, str],
        feedback: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> VerifiableRecordView:
        """
        Record a review decision.

        Creates the joined verification row if the record has none yet, and
        updates it in place otherwise. Terminal statuses record the acting
        reviewer; pending clears it.

        Raises:
            Unauthenticated: No actor
            Forbidden: Students (even on their own records), or a mentor not
                assigned to the record's owner
            ValidationError: Unknown kind or status, rejection without feedback
            NotFound: No reviewable record with this id
            StoreFailure: The write failed; nothing was applied
        """
        if actor is None:
            raise Unauthenticated("Not authenticated")
        if not actor.is_reviewer:
            raise Forbidden("Only mentors and admins can review records")

        vk = get_kind(self._one_kind(kind))
        target = parse_status(status)
        feedback = normalize_feedback(target, feedback)

        current = await self._load(vk, record_id)
        if current is None:
            raise NotFound(f"{vk.kind.value.capitalize()} not found")

        scope = await self._scope(actor)
        if not scope.permits(current.owner_id):
            raise Forbidden("You are not assigned to this student")

        if not can_transition(actor.role, current.status, target):
            raise Forbidden(
                f"Transition {current.status.value} -> {target.value} not allowed for {actor.role.value}"
            )

        previous_reviewer = current.verification.reviewer
        reviewer_id = actor.id if is_terminal(target) else None
        admin_override = bool(
            actor.is_admin
            and previous_reviewer is not None
            and previous_reviewer.id != actor.id
        )

        try:
            await vk.write_state(self.session, record_id, target, reviewer_id, feedback)
            await self.event_store.log(
                event_type=EventType.VERIFICATION_STATUS_CHANGED,
                entity_type=vk.kind.value,
                entity_id=record_id,
                user_id=actor.id,
                payload={
                    "owner_id": current.owner_id,
                    "from_status": current.status,
                    "to_status": target,
                    "feedback": feedback,
                    "previous_reviewer_id": previous_reviewer.id if previous_reviewer else None,
                    "admin_override": admin_override,
                },
                ip_address=ip_address,
            )
            await self.session.flush()
        except SQLAlchemyError as exc:
            logger.error(
                "Verification write failed",
                exc_info=True,
                extra={"kind": vk.kind.value, "record_id": str(record_id)},
            )
            raise StoreFailure("Could not save the verification decision") from exc

        logger.info(
            "Verification status changed",
            extra={
                "kind": vk.kind.value,
                "record_id": str(record_id),
                "from_status": current.status.value,
                "to_status": target.value,
                "reviewer_id": str(actor.id),
                "admin_override": admin_override,
            },
        )

        updated = await self._load(vk, record_id)
        if updated is None:
            # Record vanished between write and read-back
            raise NotFound(f"{vk.kind.value.capitalize()} not found")
        return updated

    # Internals

    @staticmethod
    def _one_kind(kind: KindArg) -> RecordKind:
        return kind if isinstance(kind, RecordKind) else parse_kind(kind)

    async def _scope(self, actor: Optional[Actor]) -> OwnerScope:
        try:
            return await resolve_scope(self.session, actor)
        except SQLAlchemyError as exc:
            raise StoreFailure("Could not resolve mentor assignments") from exc

    @staticmethod
    def _filtered(
        vk: VerifiableKind,
        kq: KindQuery,
        scope: OwnerScope,
        status: Optional[VerificationStatus],
    ) -> Select:
        query = kq.query.where(scope.predicate(vk.owner_column))
        if status is not None:
            query = query.where(kq.status == status.value)
        return query

    async def _execute(self, query: Select):
        try:
            return await self.session.execute(query)
        except SQLAlchemyError as exc:
            raise StoreFailure("Record store unavailable") from exc

    async def _fetch(
        self,
        vk: VerifiableKind,
        scope: OwnerScope,
        status: Optional[VerificationStatus],
    ) -> List[VerifiableRecordView]:
        kq = vk.select_records()
        query = (
            self._filtered(vk, kq, scope, status)
            .order_by(*vk.order_by(kq.owner), vk.model.id)
            .execution_options(populate_existing=True)
        )
        result = await self._execute(query)
        return [vk.to_view(row) for row in result.all()]

    async def _count_pending(self, scope: OwnerScope) -> PendingCounts:
        by_kind = {}
        for k in RecordKind:
            vk = get_kind(k)
            kq = vk.select_records(func.count(vk.model.id))
            result = await self._execute(
                self._filtered(vk, kq, scope, VerificationStatus.PENDING)
            )
            by_kind[k] = result.scalar_one()
        return PendingCounts(by_kind=by_kind)

    async def _load(self, vk: VerifiableKind, record_id: uuid.UUID) -> Optional[VerifiableRecordView]:
        kq = vk.select_records()
        query = kq.query.where(vk.model.id == record_id).execution_options(populate_existing=True)
        result = await self._execute(query)
        row = result.first()
        return vk.to_view(row) if row is not None else None
