"""
Schemas for creating and editing portfolio records.

Create bodies list required fields; update bodies make everything optional
and only the fields actually sent are applied.
"""

import uuid
from datetime import date, datetime, time
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, Field

from practicum.engines.verification.types import RecordKind
from practicum.kernel.models.records import (
    ActivityStatus,
    ActivityType,
    CompetencyLevel,
    SessionStatus,
)


class _OwnedCreate(BaseModel):
    # Admins only; students always create for themselves
    owner_id: Optional[uuid.UUID] = None


class QualificationCreate(_OwnedCreate):
    title: str = Field(..., min_length=1, max_length=255)
    issuing_organization: str = Field(..., min_length=1, max_length=255)
    qualification_type: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    date_obtained: date
    expiry_date: Optional[date] = None
    certificate_url: Optional[str] = None


class QualificationUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    issuing_organization: Optional[str] = Field(None, min_length=1, max_length=255)
    qualification_type: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    date_obtained: Optional[date] = None
    expiry_date: Optional[date] = None
    certificate_url: Optional[str] = None


class SessionCreate(_OwnedCreate):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    session_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    location: Optional[str] = Field(None, max_length=255)
    status: SessionStatus = SessionStatus.PLANNED
    reflection: Optional[str] = None


class SessionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    session_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    location: Optional[str] = Field(None, max_length=255)
    status: Optional[SessionStatus] = None
    reflection: Optional[str] = None


class ActivityCreate(_OwnedCreate):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    activity_type: ActivityType
    date_completed: date
    duration_minutes: Optional[int] = Field(None, ge=0)
    evidence_url: Optional[str] = None
    status: ActivityStatus = ActivityStatus.DRAFT


class ActivityUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    activity_type: Optional[ActivityType] = None
    date_completed: Optional[date] = None
    duration_minutes: Optional[int] = Field(None, ge=0)
    evidence_url: Optional[str] = None
    status: Optional[ActivityStatus] = None


class StudentCompetencyCreate(_OwnedCreate):
    competency_id: uuid.UUID
    level: CompetencyLevel
    evidence_url: Optional[str] = None


class StudentCompetencyUpdate(BaseModel):
    competency_id: Optional[uuid.UUID] = None
    level: Optional[CompetencyLevel] = None
    evidence_url: Optional[str] = None


class ProfileDocumentCreate(_OwnedCreate):
    title: str = Field(..., min_length=1, max_length=255)
    document_url: Optional[str] = None


class ProfileDocumentUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    document_url: Optional[str] = None


CREATE_SCHEMAS: Dict[RecordKind, Type[BaseModel]] = {
    RecordKind.QUALIFICATION: QualificationCreate,
    RecordKind.SESSION: SessionCreate,
    RecordKind.ACTIVITY: ActivityCreate,
    RecordKind.COMPETENCY: StudentCompetencyCreate,
    RecordKind.PROFILE: ProfileDocumentCreate,
}

UPDATE_SCHEMAS: Dict[RecordKind, Type[BaseModel]] = {
    RecordKind.QUALIFICATION: QualificationUpdate,
    RecordKind.SESSION: SessionUpdate,
    RecordKind.ACTIVITY: ActivityUpdate,
    RecordKind.COMPETENCY: StudentCompetencyUpdate,
    RecordKind.PROFILE: ProfileDocumentUpdate,
}


class RecordResponse(BaseModel):
    """A record as its owner edits it."""

    kind: str
    id: uuid.UUID
    owner_id: uuid.UUID
    fields: Dict[str, Any]
    created_at: datetime
    updated_at: datetime


class CompetencyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class CompetencyResponse(BaseModel):
    id: uuid.UUID
    name: str
    category: str
    description: Optional[str] = None

    class Config:
        from_attributes = True
