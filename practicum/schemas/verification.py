"""
Pydantic schemas for the verification API.
"""

import uuid
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from practicum.engines.verification.types import (
    PendingCounts,
    VerifiableRecordView,
    VerificationListing,
)


class StatusUpdateRequest(BaseModel):
    """Body for a review decision."""

    status: str = Field(..., description="pending, verified or rejected")
    feedback: Optional[str] = Field(None, max_length=5000)


class ReviewerResponse(BaseModel):
    id: uuid.UUID
    name: str


class VerificationStateResponse(BaseModel):
    status: str
    reviewer: Optional[ReviewerResponse] = None
    feedback: Optional[str] = None


class VerifiableRecordResponse(BaseModel):
    """A record of any kind as shown on the review screen."""

    kind: str
    id: uuid.UUID
    owner_id: uuid.UUID
    owner_name: str
    owner_email: str
    title: str
    occurred_on: Optional[date] = None
    verification: VerificationStateResponse
    details: Dict[str, Any] = {}

    @classmethod
    def from_view(cls, view: VerifiableRecordView) -> "VerifiableRecordResponse":
        reviewer = view.verification.reviewer
        return cls(
            kind=view.kind.value,
            id=view.id,
            owner_id=view.owner_id,
            owner_name=view.owner_name,
            owner_email=view.owner_email,
            title=view.title,
            occurred_on=view.occurred_on,
            verification=VerificationStateResponse(
                status=view.verification.status.value,
                reviewer=ReviewerResponse(id=reviewer.id, name=reviewer.name) if reviewer else None,
                feedback=view.verification.feedback,
            ),
            details=view.details,
        )


class PendingCountsResponse(BaseModel):
    by_kind: Dict[str, int]
    total: int

    @classmethod
    def from_counts(cls, counts: PendingCounts) -> "PendingCountsResponse":
        return cls(
            by_kind={kind.value: n for kind, n in counts.by_kind.items()},
            total=counts.total,
        )


class VerificationListingResponse(BaseModel):
    records: Dict[str, List[VerifiableRecordResponse]]
    counts: PendingCountsResponse

    @classmethod
    def from_listing(cls, listing: VerificationListing) -> "VerificationListingResponse":
        return cls(
            records={
                kind.value: [VerifiableRecordResponse.from_view(v) for v in views]
                for kind, views in listing.records.items()
            },
            counts=PendingCountsResponse.from_counts(listing.counts),
        )


class VerificationEventResponse(BaseModel):
    """One entry of a record's review history."""

    id: uuid.UUID
    event_type: str
    user_id: Optional[uuid.UUID] = None
    payload: Dict[str, Any]
    created_at: datetime

    class Config:
        from_attributes = True
