"""
Mentor-student assignment directory.
"""

import uuid
from typing import Dict, List, Optional, Set

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from practicum.kernel.errors import Forbidden, NotFound, ValidationError
from practicum.kernel.events.event_store import EventStore
from practicum.kernel.identity.actor import Actor
from practicum.kernel.models.assignment import MentorAssignment
from practicum.kernel.models.event_log import EventType
from practicum.kernel.models.user import User, UserRole
from practicum.logging_config import get_logger

logger = get_logger(__name__)


class AssignmentDirectory:
    """
    Reads and maintains the mentor-student relation.

    Nothing is cached: assignments can change between requests, so every
    lookup goes to the store.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.event_store = EventStore(session)

    async def students_for(self, mentor_id: uuid.UUID) -> Set[uuid.UUID]:
        """Ids of the students assigned to a mentor."""
        result = await self.session.execute(
            select(MentorAssignment.student_id).where(MentorAssignment.mentor_id == mentor_id)
        )
        return {row[0] for row in result.all()}

    async def mentors_for(self, student_id: uuid.UUID) -> Set[uuid.UUID]:
        """Ids of the mentors assigned to a student."""
        result = await self.session.execute(
            select(MentorAssignment.mentor_id).where(MentorAssignment.student_id == student_id)
        )
        return {row[0] for row in result.all()}

    async def assigned_to(self, actor: Actor) -> List[User]:
        """
        The other side of the actor's assignments, ordered by name.

        Mentors get their students, students get their mentors.

        Raises:
            Forbidden: For admins, who are not part of any assignment
        """
        if actor.is_mentor:
            ids = await self.students_for(actor.id)
        elif actor.is_student:
            ids = await self.mentors_for(actor.id)
        else:
            raise Forbidden("Only mentors and students have assignments")

        if not ids:
            return []
        result = await self.session.execute(
            select(User).where(User.id.in_(ids)).order_by(User.full_name)
        )
        return list(result.scalars().all())

    async def is_assigned(self, mentor_id: uuid.UUID, student_id: uuid.UUID) -> bool:
        result = await self.session.execute(
            select(MentorAssignment.id).where(
                and_(
                    MentorAssignment.mentor_id == mentor_id,
                    MentorAssignment.student_id == student_id,
                )
            )
        )
        return result.scalar_one_or_none() is not None

    async def assign(
        self,
        mentor_id: uuid.UUID,
        student_id: uuid.UUID,
        assigned_by: Optional[uuid.UUID] = None,
        ip_address: Optional[str] = None,
    ) -> MentorAssignment:
        """
        Assign a student to a mentor.

        Raises:
            ValidationError: If either user has the wrong role, or the pair
                already exists
        """
        await self._require_role(mentor_id, UserRole.MENTOR, "mentor_id")
        await self._require_role(student_id, UserRole.STUDENT, "student_id")

        if await self.is_assigned(mentor_id, student_id):
            raise ValidationError("Student is already assigned to this mentor", field="student_id")

        assignment = MentorAssignment(
            mentor_id=mentor_id,
            student_id=student_id,
            assigned_by=assigned_by,
        )
        self.session.add(assignment)
        await self.session.flush()
        await self.session.refresh(assignment)

        await self.event_store.log(
            event_type=EventType.ASSIGNMENT_CREATED,
            entity_type="assignment",
            entity_id=assignment.id,
            user_id=assigned_by,
            payload={"mentor_id": mentor_id, "student_id": student_id},
            ip_address=ip_address,
        )
        logger.info(
            "Mentor assigned",
            extra={"mentor_id": str(mentor_id), "student_id": str(student_id)},
        )
        return assignment

    async def unassign(
        self,
        mentor_id: uuid.UUID,
        student_id: uuid.UUID,
        removed_by: Optional[uuid.UUID] = None,
        ip_address: Optional[str] = None,
    ) -> None:
        """
        Remove an assignment.

        Raises:
            NotFound: If the pair is not assigned
        """
        result = await self.session.execute(
            select(MentorAssignment).where(
                and_(
                    MentorAssignment.mentor_id == mentor_id,
                    MentorAssignment.student_id == student_id,
                )
            )
        )
        assignment = result.scalar_one_or_none()
        if assignment is None:
            raise NotFound("Assignment not found")

        await self.session.delete(assignment)
        await self.session.flush()

        await self.event_store.log(
            event_type=EventType.ASSIGNMENT_REMOVED,
            entity_type="assignment",
            entity_id=assignment.id,
            user_id=removed_by,
            payload={"mentor_id": mentor_id, "student_id": student_id},
            ip_address=ip_address,
        )

    async def list_assignments(self, mentor_id: Optional[uuid.UUID] = None) -> List[dict]:
        """
        Assignments grouped by mentor, mentors and students ordered by name.

        Returns:
            [{"mentor_id", "mentor_name", "mentor_email", "students": [...]}]
        """
        mentor = aliased(User)
        student = aliased(User)
        query = (
            select(MentorAssignment, mentor, student)
            .join(mentor, MentorAssignment.mentor_id == mentor.id)
            .join(student, MentorAssignment.student_id == student.id)
            .order_by(mentor.full_name, student.full_name)
        )
        if mentor_id is not None:
            query = query.where(MentorAssignment.mentor_id == mentor_id)

        result = await self.session.execute(query)

        grouped: Dict[uuid.UUID, dict] = {}
        for assignment, m, s in result.all():
            entry = grouped.setdefault(m.id, {
                "mentor_id": m.id,
                "mentor_name": m.full_name,
                "mentor_email": m.email,
                "students": [],
            })
            entry["students"].append({
                "student_id": s.id,
                "student_name": s.full_name,
                "student_email": s.email,
                "assigned_at": assignment.assigned_at,
            })
        return list(grouped.values())

    async def _require_role(self, user_id: uuid.UUID, role: UserRole, field: str) -> User:
        result = await self.session.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise ValidationError("User does not exist", field=field)
        if UserRole(user.role) != role:
            raise ValidationError(f"User is not a {role.value}", field=field)
        return user
