"""
Mentor assignment endpoints.

Admins manage the whole relation; mentors and students read their own side
of it through /mine.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Query, Request, status

from practicum.api.deps import AdminUser, CurrentActor, DbSession, get_client_ip
from practicum.kernel.permissions.assignment_directory import AssignmentDirectory
from practicum.schemas.assignment import (
    AssignmentCreate,
    AssignmentResponse,
    MentorAssignments,
)
from practicum.schemas.auth import UserResponse
from practicum.schemas.common import SuccessResponse

router = APIRouter()


@router.get("", response_model=List[MentorAssignments])
async def list_assignments(
    admin: AdminUser,
    db: DbSession,
    mentor_id: Optional[uuid.UUID] = Query(None),
):
    """Assignments grouped by mentor."""
    return await AssignmentDirectory(db).list_assignments(mentor_id=mentor_id)


@router.get("/mine", response_model=List[UserResponse])
async def my_assignments(actor: CurrentActor, db: DbSession):
    """A mentor's students, or a student's mentors."""
    users = await AssignmentDirectory(db).assigned_to(actor)
    return [UserResponse.model_validate(u) for u in users]


@router.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    request: Request,
    data: AssignmentCreate,
    admin: AdminUser,
    db: DbSession,
):
    """Assign a student to a mentor. Takes effect on the mentor's next request."""
    assignment = await AssignmentDirectory(db).assign(
        data.mentor_id,
        data.student_id,
        assigned_by=admin.id,
        ip_address=get_client_ip(request),
    )
    return AssignmentResponse.model_validate(assignment)


@router.delete("/{mentor_id}/{student_id}", response_model=SuccessResponse)
async def delete_assignment(
    request: Request,
    mentor_id: uuid.UUID,
    student_id: uuid.UUID,
    admin: AdminUser,
    db: DbSession,
):
    await AssignmentDirectory(db).unassign(
        mentor_id,
        student_id,
        removed_by=admin.id,
        ip_address=get_client_ip(request),
    )
    return SuccessResponse(message="Assignment removed")
