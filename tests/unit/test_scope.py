"""Unit tests for OwnerScope."""

import uuid

import pytest
from sqlalchemy.dialects import sqlite
from sqlalchemy.sql.elements import False_, True_

from practicum.kernel.errors import Forbidden
from practicum.kernel.identity.actor import Actor
from practicum.kernel.models.records import TeachingSession
from practicum.kernel.models.user import UserRole
from practicum.kernel.permissions.scope import OwnerScope


def _sql(clause) -> str:
    return str(clause.compile(dialect=sqlite.dialect()))


@pytest.fixture
def mentor_actor() -> Actor:
    return Actor(id=uuid.uuid4(), role=UserRole.MENTOR, full_name="Morgan Mentor")


class TestOwnerScope:

    def test_unrestricted_permits_everyone(self, mentor_actor):
        scope = OwnerScope(actor=mentor_actor)

        assert scope.unrestricted
        assert scope.permits(uuid.uuid4())
        assert isinstance(scope.predicate(TeachingSession.student_id), True_)

    def test_empty_scope_matches_nothing(self, mentor_actor):
        scope = OwnerScope(actor=mentor_actor, owners=frozenset())

        assert not scope.permits(uuid.uuid4())
        assert isinstance(scope.predicate(TeachingSession.student_id), False_)

    def test_restricted_scope_uses_in_clause(self, mentor_actor):
        student_id = uuid.uuid4()
        scope = OwnerScope(actor=mentor_actor, owners=frozenset({student_id}))

        assert scope.permits(student_id)
        assert " IN " in _sql(scope.predicate(TeachingSession.student_id))

    def test_narrow_within_scope(self, mentor_actor):
        student_id = uuid.uuid4()
        scope = OwnerScope(actor=mentor_actor, owners=frozenset({student_id, uuid.uuid4()}))

        narrowed = scope.narrow(student_id)

        assert narrowed.owners == frozenset({student_id})
        assert scope.narrow(None) is scope

    def test_narrow_outside_scope_is_forbidden(self, mentor_actor):
        scope = OwnerScope(actor=mentor_actor, owners=frozenset({uuid.uuid4()}))

        with pytest.raises(Forbidden) as exc_info:
            scope.narrow(uuid.uuid4())
        assert exc_info.value.field == "owner_id"

    def test_admin_may_narrow_to_anyone(self):
        admin = Actor(id=uuid.uuid4(), role=UserRole.ADMIN)
        owner = uuid.uuid4()

        assert OwnerScope(actor=admin).narrow(owner).owners == frozenset({owner})
