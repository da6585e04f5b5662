"""Integration tests for owner-side record writes and the competency catalog."""

import uuid
from datetime import date

import pytest
from sqlalchemy import select

from practicum.engines.records.catalog import CompetencyCatalog
from practicum.engines.records.record_service import RecordService
from practicum.engines.verification.engine import VerificationEngine
from practicum.engines.verification.types import RecordKind
from practicum.kernel.errors import Forbidden, NotFound, Unauthenticated, ValidationError
from practicum.kernel.models import EventLog, EventType, VerificationStatus


@pytest.fixture
def service(db_session) -> RecordService:
    return RecordService(db_session)


@pytest.fixture
def engine(db_session) -> VerificationEngine:
    return VerificationEngine(db_session)


class TestCreate:

    @pytest.mark.asyncio
    async def test_student_creates_own_pending_record(self, service, engine, as_actor, student):
        record = await service.create(as_actor(student), "qualification", {
            "title": "First Aid",
            "issuing_organization": "Red Cross",
            "date_obtained": date(2024, 5, 1),
        })

        assert record.student_id == student.id
        view = await engine.get_record(as_actor(student), "qualification", record.id)
        assert view.status == VerificationStatus.PENDING

    @pytest.mark.asyncio
    async def test_student_cannot_create_for_someone_else(self, service, as_actor, student, other_student):
        with pytest.raises(Forbidden):
            await service.create(as_actor(student), "profile", {
                "title": "ID card",
                "owner_id": other_student.id,
            })

    @pytest.mark.asyncio
    async def test_admin_creates_on_behalf_of_student(self, service, as_actor, admin, student):
        record = await service.create(as_actor(admin), "session", {
            "title": "Guest lesson",
            "session_date": date(2025, 1, 20),
            "status": "completed",
            "owner_id": student.id,
        })

        assert record.student_id == student.id
        assert record.status == "completed"

    @pytest.mark.asyncio
    async def test_admin_must_name_a_student_owner(self, service, as_actor, admin, mentor):
        with pytest.raises(ValidationError) as exc_info:
            await service.create(as_actor(admin), "profile", {"title": "Doc"})
        assert exc_info.value.field == "owner_id"

        with pytest.raises(ValidationError):
            await service.create(as_actor(admin), "profile", {"title": "Doc", "owner_id": mentor.id})

    @pytest.mark.asyncio
    async def test_mentors_cannot_create(self, service, as_actor, mentor):
        with pytest.raises(Forbidden):
            await service.create(as_actor(mentor), "profile", {"title": "Doc"})

    @pytest.mark.asyncio
    async def test_missing_and_unknown_fields(self, service, as_actor, student):
        actor = as_actor(student)

        with pytest.raises(ValidationError) as exc_info:
            await service.create(actor, "activity", {"title": "Workshop", "date_completed": date(2025, 1, 1)})
        assert exc_info.value.field == "activity_type"

        with pytest.raises(ValidationError) as exc_info:
            await service.create(actor, "profile", {"title": "Doc", "verification_status": "verified"})
        assert exc_info.value.field == "verification_status"

        with pytest.raises(ValidationError):
            await service.create(actor, "activity", {
                "title": "Workshop",
                "activity_type": "party",
                "date_completed": date(2025, 1, 1),
            })

    @pytest.mark.asyncio
    async def test_competency_rating_needs_catalog_entry(self, service, records, as_actor, student):
        actor = as_actor(student)
        with pytest.raises(ValidationError) as exc_info:
            await service.create(actor, "competency", {"competency_id": uuid.uuid4(), "level": "advanced"})
        assert exc_info.value.field == "competency_id"

        competency = await records.competency()
        rating = await service.create(actor, "competency", {"competency_id": competency.id, "level": "advanced"})
        assert rating.level == "advanced"

    @pytest.mark.asyncio
    async def test_no_actor(self, service):
        with pytest.raises(Unauthenticated):
            await service.create(None, "profile", {"title": "Doc"})


class TestUpdate:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", list(RecordKind))
    async def test_owner_edit_resets_any_kind_to_pending(
        self, service, engine, records, as_actor, admin, student, kind
    ):
        record = {
            RecordKind.QUALIFICATION: records.qualification,
            RecordKind.SESSION: records.session_record,
            RecordKind.ACTIVITY: records.activity,
            RecordKind.COMPETENCY: records.student_competency,
            RecordKind.PROFILE: records.profile_document,
        }[kind]
        created = await record(student)
        await engine.set_status(as_actor(admin), kind, created.id, "rejected", feedback="Please fix")

        change = {"level": "expert"} if kind == RecordKind.COMPETENCY else {"title": "Revised"}
        await service.update(as_actor(student), kind, created.id, change)

        view = await engine.get_record(as_actor(admin), kind, created.id)
        assert view.status == VerificationStatus.PENDING
        assert view.verification.reviewer is None
        assert view.verification.feedback is None

    @pytest.mark.asyncio
    async def test_admin_edit_keeps_decision(self, service, engine, records, as_actor, admin, student):
        qualification = await records.qualification(student)
        await engine.set_status(as_actor(admin), "qualification", qualification.id, "verified")

        updated = await service.update(as_actor(admin), "qualification", qualification.id, {"title": "Typo fixed"})

        assert updated.title == "Typo fixed"
        view = await engine.get_record(as_actor(admin), "qualification", qualification.id)
        assert view.status == VerificationStatus.VERIFIED
        assert view.verification.reviewer.id == admin.id

    @pytest.mark.asyncio
    async def test_reset_is_audited(self, db_session, service, engine, records, as_actor, admin, student):
        profile = await records.profile_document(student)
        await engine.set_status(as_actor(admin), "profile", profile.id, "verified")

        await service.update(as_actor(student), "profile", profile.id, {"document_url": "https://files/id.pdf"})

        history = await engine.record_history(as_actor(admin), "profile", profile.id)
        assert history[0].event_type == EventType.VERIFICATION_RESET.value
        assert history[0].payload["from_status"] == "verified"

        updates = (await db_session.execute(
            select(EventLog).where(
                EventLog.entity_id == profile.id,
                EventLog.event_type == EventType.RECORD_UPDATED.value,
            )
        )).scalars().all()
        assert updates[0].payload["verification_reset"] is True

    @pytest.mark.asyncio
    async def test_editing_pending_record_logs_no_reset(self, service, engine, records, as_actor, admin, student):
        profile = await records.profile_document(student)

        await service.update(as_actor(student), "profile", profile.id, {"title": "Renamed"})

        assert await engine.record_history(as_actor(admin), "profile", profile.id) == []

    @pytest.mark.asyncio
    async def test_only_owner_or_admin_may_edit(
        self, service, records, as_actor, mentor, other_student, student, assigned
    ):
        profile = await records.profile_document(student)

        with pytest.raises(Forbidden):
            await service.update(as_actor(other_student), "profile", profile.id, {"title": "Mine now"})
        with pytest.raises(Forbidden):
            await service.update(as_actor(mentor), "profile", profile.id, {"title": "Mentor edit"})

    @pytest.mark.asyncio
    async def test_owner_is_immutable(self, service, records, as_actor, admin, student, other_student):
        profile = await records.profile_document(student)

        with pytest.raises(ValidationError) as exc_info:
            await service.update(as_actor(admin), "profile", profile.id, {"owner_id": other_student.id})
        assert exc_info.value.field == "owner_id"

    @pytest.mark.asyncio
    async def test_missing_record(self, service, as_actor, admin):
        with pytest.raises(NotFound):
            await service.update(as_actor(admin), "activity", uuid.uuid4(), {"title": "x"})

    @pytest.mark.asyncio
    async def test_submitting_a_draft_puts_it_in_review(
        self, service, engine, records, as_actor, mentor, student, assigned
    ):
        from practicum.kernel.models import ActivityStatus

        draft = await records.activity(student, status=ActivityStatus.DRAFT)
        assert (await engine.count_pending(as_actor(mentor))).by_kind[RecordKind.ACTIVITY] == 0

        await service.update(as_actor(student), "activity", draft.id, {"status": "submitted"})

        assert (await engine.count_pending(as_actor(mentor))).by_kind[RecordKind.ACTIVITY] == 1


class TestCompetencyCatalog:

    @pytest.mark.asyncio
    async def test_admin_adds_and_anyone_lists(self, db_session, as_actor, admin, student):
        catalog = CompetencyCatalog(db_session)

        await catalog.create_competency(as_actor(admin), name="Questioning", category="Instruction")
        await catalog.create_competency(as_actor(admin), name="Routines", category="Environment")

        listed = await catalog.list_competencies(as_actor(student))
        assert [c.name for c in listed] == ["Routines", "Questioning"]
        only = await catalog.list_competencies(as_actor(student), category="Instruction")
        assert [c.name for c in only] == ["Questioning"]

    @pytest.mark.asyncio
    async def test_non_admins_cannot_add(self, db_session, as_actor, mentor):
        with pytest.raises(Forbidden):
            await CompetencyCatalog(db_session).create_competency(as_actor(mentor), name="X", category="Y")

    @pytest.mark.asyncio
    async def test_duplicates_rejected(self, db_session, as_actor, admin):
        catalog = CompetencyCatalog(db_session)
        await catalog.create_competency(as_actor(admin), name="Questioning", category="Instruction")

        with pytest.raises(ValidationError):
            await catalog.create_competency(as_actor(admin), name=" Questioning ", category="Instruction")
