"""
Mentor assignment schemas.
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel


class AssignmentCreate(BaseModel):
    mentor_id: uuid.UUID
    student_id: uuid.UUID


class AssignmentResponse(BaseModel):
    id: uuid.UUID
    mentor_id: uuid.UUID
    student_id: uuid.UUID
    assigned_at: datetime

    class Config:
        from_attributes = True


class AssignedStudent(BaseModel):
    student_id: uuid.UUID
    student_name: str
    student_email: str
    assigned_at: datetime


class MentorAssignments(BaseModel):
    """One mentor and the students assigned to them."""

    mentor_id: uuid.UUID
    mentor_name: str
    mentor_email: str
    students: List[AssignedStudent]
