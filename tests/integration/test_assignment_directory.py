"""Integration tests for the mentor assignment directory."""

import pytest

from practicum.kernel.errors import Forbidden, NotFound, ValidationError
from practicum.kernel.permissions.assignment_directory import AssignmentDirectory
from practicum.kernel.permissions.scope import resolve_scope


@pytest.fixture
def directory(db_session) -> AssignmentDirectory:
    return AssignmentDirectory(db_session)


class TestAssignmentDirectory:

    @pytest.mark.asyncio
    async def test_assign_and_lookup(self, directory, admin, mentor, student):
        assignment = await directory.assign(mentor.id, student.id, assigned_by=admin.id)

        assert assignment.assigned_at is not None
        assert await directory.students_for(mentor.id) == {student.id}
        assert await directory.mentors_for(student.id) == {mentor.id}
        assert await directory.is_assigned(mentor.id, student.id)

    @pytest.mark.asyncio
    async def test_duplicate_assignment_rejected(self, directory, mentor, student, assigned):
        with pytest.raises(ValidationError):
            await directory.assign(mentor.id, student.id)

    @pytest.mark.asyncio
    async def test_roles_are_checked(self, directory, mentor, other_mentor, student, other_student):
        with pytest.raises(ValidationError) as exc_info:
            await directory.assign(student.id, other_student.id)
        assert exc_info.value.field == "mentor_id"

        with pytest.raises(ValidationError) as exc_info:
            await directory.assign(mentor.id, other_mentor.id)
        assert exc_info.value.field == "student_id"

    @pytest.mark.asyncio
    async def test_unassign(self, directory, mentor, student, assigned):
        await directory.unassign(mentor.id, student.id)

        assert await directory.students_for(mentor.id) == set()
        with pytest.raises(NotFound):
            await directory.unassign(mentor.id, student.id)

    @pytest.mark.asyncio
    async def test_list_grouped_by_mentor(
        self, directory, mentor, other_mentor, student, other_student
    ):
        await directory.assign(mentor.id, other_student.id)
        await directory.assign(mentor.id, student.id)
        await directory.assign(other_mentor.id, student.id)

        grouped = await directory.list_assignments()

        assert [g["mentor_name"] for g in grouped] == ["Morgan Mentor", "Noor Mentor"]
        assert [s["student_name"] for s in grouped[0]["students"]] == ["Alex Student", "Blake Student"]
        only = await directory.list_assignments(mentor_id=other_mentor.id)
        assert len(only) == 1 and only[0]["students"][0]["student_id"] == student.id

    @pytest.mark.asyncio
    async def test_assigned_to_returns_the_other_side(
        self, directory, as_actor, admin, mentor, other_mentor, student, other_student
    ):
        await directory.assign(mentor.id, other_student.id)
        await directory.assign(mentor.id, student.id)
        await directory.assign(other_mentor.id, student.id)

        students = await directory.assigned_to(as_actor(mentor))
        mentors = await directory.assigned_to(as_actor(student))

        assert [u.full_name for u in students] == ["Alex Student", "Blake Student"]
        assert [u.full_name for u in mentors] == ["Morgan Mentor", "Noor Mentor"]
        with pytest.raises(Forbidden):
            await directory.assigned_to(as_actor(admin))

    @pytest.mark.asyncio
    async def test_assigned_to_unassigned_mentor_is_empty(self, directory, as_actor, mentor):
        assert await directory.assigned_to(as_actor(mentor)) == []


class TestResolveScope:

    @pytest.mark.asyncio
    async def test_scope_per_role(
        self, db_session, as_actor, admin, mentor, student, other_student, assigned
    ):
        admin_scope = await resolve_scope(db_session, as_actor(admin))
        mentor_scope = await resolve_scope(db_session, as_actor(mentor))
        student_scope = await resolve_scope(db_session, as_actor(student))

        assert admin_scope.unrestricted
        assert mentor_scope.owners == frozenset({student.id})
        assert student_scope.owners == frozenset({student.id})
        assert not mentor_scope.permits(other_student.id)
