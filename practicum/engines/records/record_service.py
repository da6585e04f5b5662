"""
Owner-side create and edit of portfolio records.

Editing a record a reviewer already decided on sends it back to pending, so
an approval always refers to the content the reviewer actually saw.
"""

import uuid
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Set, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practicum.engines.verification.kinds import VerifiableKind, get_kind
from practicum.engines.verification.state_machine import can_transition
from practicum.engines.verification.types import RecordKind, parse_kind
from practicum.kernel.errors import Forbidden, NotFound, Unauthenticated, ValidationError
from practicum.kernel.events.event_store import EventStore
from practicum.kernel.identity.actor import Actor
from practicum.kernel.models.event_log import EventType
from practicum.kernel.models.records import (
    ActivityStatus,
    ActivityType,
    Competency,
    CompetencyLevel,
    SessionStatus,
)
from practicum.kernel.models.user import User, UserRole
from practicum.kernel.models.verification import VerificationStatus
from practicum.logging_config import get_logger

logger = get_logger(__name__)


# Writable columns per kind; owner and verification columns are never writable here
EDITABLE_FIELDS: Dict[RecordKind, Set[str]] = {
    RecordKind.QUALIFICATION: {
        "title", "issuing_organization", "qualification_type", "description",
        "date_obtained", "expiry_date", "certificate_url",
    },
    RecordKind.SESSION: {
        "title", "description", "session_date", "start_time", "end_time",
        "location", "status", "reflection",
    },
    RecordKind.ACTIVITY: {
        "title", "description", "activity_type", "date_completed",
        "duration_minutes", "evidence_url", "status",
    },
    RecordKind.COMPETENCY: {"competency_id", "level", "evidence_url"},
    RecordKind.PROFILE: {"title", "document_url"},
}

REQUIRED_FIELDS: Dict[RecordKind, Set[str]] = {
    RecordKind.QUALIFICATION: {"title", "issuing_organization", "date_obtained"},
    RecordKind.SESSION: {"title", "session_date"},
    RecordKind.ACTIVITY: {"title", "activity_type", "date_completed"},
    RecordKind.COMPETENCY: {"competency_id", "level"},
    RecordKind.PROFILE: {"title"},
}

_ENUM_FIELDS: Dict[RecordKind, Dict[str, Type[Enum]]] = {
    RecordKind.SESSION: {"status": SessionStatus},
    RecordKind.ACTIVITY: {"status": ActivityStatus, "activity_type": ActivityType},
    RecordKind.COMPETENCY: {"level": CompetencyLevel},
}


class RecordService:
    """
    Create and update student-owned records of every verifiable kind.

    Students write their own records. Admins may write on a student's
    behalf. Mentors only review.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.event_store = EventStore(session)

    async def create(
        self,
        actor: Optional[Actor],
        kind: Any,
        data: Mapping[str, Any],
        ip_address: Optional[str] = None,
    ):
        """
        Create a record. It starts out pending.

        Args:
            actor: The creating user
            kind: Record kind
            data: Field values; admins must include ``owner_id``

        Raises:
            Unauthenticated: No actor
            Forbidden: Mentors, or a student naming another owner
            ValidationError: Missing or unknown fields, bad owner
        """
        if actor is None:
            raise Unauthenticated("Not authenticated")
        if actor.is_mentor:
            raise Forbidden("Mentors cannot create portfolio records")

        record_kind = self._kind(kind)
        values = dict(data)
        owner_id = values.pop("owner_id", None)

        if actor.is_student:
            if owner_id is not None and owner_id != actor.id:
                raise Forbidden("Students can only create their own records", field="owner_id")
            owner_id = actor.id
        else:
            if owner_id is None:
                raise ValidationError("owner_id is required", field="owner_id")
            await self._require_student(owner_id)

        cleaned = await self._clean(record_kind, values)
        missing = sorted(REQUIRED_FIELDS[record_kind] - cleaned.keys())
        if missing:
            raise ValidationError(f"Missing required field: {missing[0]}", field=missing[0])

        vk = get_kind(record_kind)
        record = vk.model(student_id=owner_id, **cleaned)
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)

        await self.event_store.log(
            event_type=EventType.RECORD_CREATED,
            entity_type=record_kind.value,
            entity_id=record.id,
            user_id=actor.id,
            payload={"owner_id": owner_id, "fields": sorted(cleaned)},
            ip_address=ip_address,
        )
        await self.session.flush()

        logger.info(
            "Record created",
            extra={"kind": record_kind.value, "record_id": str(record.id), "owner_id": str(owner_id)},
        )
        return record

    async def update(
        self,
        actor: Optional[Actor],
        kind: Any,
        record_id: uuid.UUID,
        changes: Mapping[str, Any],
        ip_address: Optional[str] = None,
    ):
        """
        Apply changes to an existing record.

        An owner edit resets the verification substate to pending and clears
        reviewer and feedback. Admin edits leave it alone.

        Raises:
            Unauthenticated: No actor
            NotFound: No record with this id
            Forbidden: Neither the owner nor an admin
            ValidationError: Unknown fields or an attempt to change the owner
        """
        if actor is None:
            raise Unauthenticated("Not authenticated")

        record_kind = self._kind(kind)
        vk = get_kind(record_kind)
        record = await self.session.get(vk.model, record_id, populate_existing=True)
        if record is None:
            raise NotFound(f"{record_kind.value.capitalize()} not found")

        is_owner = record.student_id == actor.id
        if not (is_owner or actor.is_admin):
            raise Forbidden("Only the owner or an admin can edit this record")

        if "owner_id" in changes or "student_id" in changes:
            raise ValidationError("The owner of a record cannot be changed", field="owner_id")

        cleaned = await self._clean(record_kind, changes)
        for name, value in cleaned.items():
            setattr(record, name, value)
        await self.session.flush()

        reset_from = None
        if is_owner and cleaned:
            reset_from = await self._reset_verification(vk, record_id, actor)

        await self.event_store.log(
            event_type=EventType.RECORD_UPDATED,
            entity_type=record_kind.value,
            entity_id=record_id,
            user_id=actor.id,
            payload={"fields": sorted(cleaned), "verification_reset": reset_from is not None},
            ip_address=ip_address,
        )
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def current_status(self, vk: VerifiableKind, record_id: uuid.UUID) -> VerificationStatus:
        """Effective verification status, without the review-window filter."""
        if vk.stores_inline:
            query = select(vk.model.verification_status).where(vk.model.id == record_id)
        else:
            v = vk.verification_model
            query = select(v.verification_status).where(getattr(v, vk.link_column) == record_id)
        value = (await self.session.execute(query)).scalar_one_or_none()
        return VerificationStatus(value) if value is not None else VerificationStatus.PENDING

    @staticmethod
    def serialize(kind: Any, record) -> Dict[str, Any]:
        """Plain dict of a record's editable fields plus identity and timestamps."""
        record_kind = kind if isinstance(kind, RecordKind) else parse_kind(kind)
        fields = {name: getattr(record, name) for name in sorted(EDITABLE_FIELDS[record_kind])}
        return {
            "kind": record_kind.value,
            "id": record.id,
            "owner_id": record.student_id,
            "fields": fields,
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }

    # Internals

    @staticmethod
    def _kind(kind: Any) -> RecordKind:
        return kind if isinstance(kind, RecordKind) else parse_kind(kind)

    async def _reset_verification(
        self,
        vk: VerifiableKind,
        record_id: uuid.UUID,
        actor: Actor,
    ) -> Optional[VerificationStatus]:
        """Returns the status the record was reset from, or None if it was pending."""
        current = await self.current_status(vk, record_id)
        # Always clear stale feedback, even on an already pending record
        await vk.reset_state(self.session, record_id)
        if current == VerificationStatus.PENDING:
            return None
        if not can_transition(actor.role, current, VerificationStatus.PENDING):
            raise Forbidden(f"Cannot reset a {current.value} record")

        await self.event_store.log(
            event_type=EventType.VERIFICATION_RESET,
            entity_type=vk.kind.value,
            entity_id=record_id,
            user_id=actor.id,
            payload={"from_status": current, "to_status": VerificationStatus.PENDING},
        )
        logger.info(
            "Verification reset by owner edit",
            extra={"kind": vk.kind.value, "record_id": str(record_id), "from_status": current.value},
        )
        return current

    async def _clean(self, kind: RecordKind, values: Mapping[str, Any]) -> Dict[str, Any]:
        allowed = EDITABLE_FIELDS[kind]
        enums = _ENUM_FIELDS.get(kind, {})
        cleaned: Dict[str, Any] = {}
        for name, value in values.items():
            if name not in allowed:
                raise ValidationError(f"Unknown field for {kind.value}: {name}", field=name)
            if name in enums and value is not None:
                try:
                    value = enums[name](value).value
                except ValueError:
                    raise ValidationError(f"Invalid value for {name}: {value!r}", field=name) from None
            if name in REQUIRED_FIELDS[kind] and value is None:
                raise ValidationError(f"{name} cannot be empty", field=name)
            cleaned[name] = value

        if "competency_id" in cleaned:
            if await self.session.get(Competency, cleaned["competency_id"]) is None:
                raise ValidationError("Competency does not exist", field="competency_id")
        return cleaned

    async def _require_student(self, user_id: uuid.UUID) -> None:
        user = await self.session.get(User, user_id)
        if user is None or UserRole(user.role) != UserRole.STUDENT:
            raise ValidationError("Owner must be an existing student", field="owner_id")
