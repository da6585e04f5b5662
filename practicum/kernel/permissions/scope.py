"""
Owner scope: which students' records an actor may see and act on.

The scope is resolved once per call and then applied uniformly to every
record kind, so authorization lives in exactly one place.
"""

import uuid
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from sqlalchemy import ColumnElement, false, true
from sqlalchemy.ext.asyncio import AsyncSession

from practicum.kernel.errors import Forbidden, Unauthenticated
from practicum.kernel.identity.actor import Actor
from practicum.kernel.models.user import UserRole
from practicum.kernel.permissions.assignment_directory import AssignmentDirectory


@dataclass(frozen=True)
class OwnerScope:
    """
    A predicate over record ownership.

    ``owners`` is None for an unrestricted (admin) scope; otherwise it is the
    exact set of student ids the actor may see.
    """

    actor: Actor
    owners: Optional[FrozenSet[uuid.UUID]] = field(default=None)

    @property
    def unrestricted(self) -> bool:
        return self.owners is None

    def permits(self, owner_id: uuid.UUID) -> bool:
        return self.owners is None or owner_id in self.owners

    def predicate(self, owner_column) -> ColumnElement[bool]:
        """SQL clause restricting ``owner_column`` to this scope."""
        if self.owners is None:
            return true()
        if not self.owners:
            return false()
        return owner_column.in_(self.owners)

    def narrow(self, owner_id: Optional[uuid.UUID]) -> "OwnerScope":
        """
        Restrict the scope to a single owner.

        Raises:
            Forbidden: If the owner lies outside this scope. Asking for a
                student you may not see is an error, not an empty result.
        """
        if owner_id is None:
            return self
        if not self.permits(owner_id):
            raise Forbidden(
                "Cannot access records of a student outside your scope",
                field="owner_id",
            )
        return OwnerScope(actor=self.actor, owners=frozenset({owner_id}))


async def resolve_scope(session: AsyncSession, actor: Optional[Actor]) -> OwnerScope:
    """
    Resolve the owner scope for an actor.

    - admin: every owner
    - mentor: the students currently assigned to them, read fresh each call
    - student: themselves only

    Raises:
        Unauthenticated: If there is no actor
    """
    if actor is None:
        raise Unauthenticated("Not authenticated")

    if actor.role == UserRole.ADMIN:
        return OwnerScope(actor=actor)

    if actor.role == UserRole.MENTOR:
        students = await AssignmentDirectory(session).students_for(actor.id)
        return OwnerScope(actor=actor, owners=frozenset(students))

    return OwnerScope(actor=actor, owners=frozenset({actor.id}))
