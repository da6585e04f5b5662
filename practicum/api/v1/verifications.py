"""
Verification endpoints: the reviewer's queue, counts, and decisions.

Every route delegates to ``VerificationEngine``; scope, validation and
not-found handling all happen there and surface as domain errors.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, Query, Request

from practicum.api.deps import CurrentActor, DbSession, get_client_ip
from practicum.engines.verification.engine import VerificationEngine
from practicum.schemas.verification import (
    PendingCountsResponse,
    StatusUpdateRequest,
    VerifiableRecordResponse,
    VerificationEventResponse,
    VerificationListingResponse,
)

router = APIRouter()


@router.get("", response_model=VerificationListingResponse)
async def list_verifiable_records(
    actor: CurrentActor,
    db: DbSession,
    kind: str = Query("all", description="all, qualification, session, activity, competency or profile"),
    status: Optional[str] = Query(None, description="pending, verified or rejected"),
    owner_id: Optional[uuid.UUID] = Query(None, description="Only this student's records"),
):
    """
    List records awaiting or having had review, grouped by kind.

    Counts always describe the caller's whole pending queue.
    """
    listing = await VerificationEngine(db).list_verifiable(
        actor, kind=kind, status=status, owner_id=owner_id
    )
    return VerificationListingResponse.from_listing(listing)


@router.get("/counts", response_model=PendingCountsResponse)
async def get_pending_counts(actor: CurrentActor, db: DbSession):
    """Pending records per kind, for dashboard badges."""
    counts = await VerificationEngine(db).count_pending(actor)
    return PendingCountsResponse.from_counts(counts)


@router.get("/{kind}/{record_id}", response_model=VerifiableRecordResponse)
async def get_verifiable_record(
    kind: str,
    record_id: uuid.UUID,
    actor: CurrentActor,
    db: DbSession,
):
    view = await VerificationEngine(db).get_record(actor, kind, record_id)
    return VerifiableRecordResponse.from_view(view)


@router.patch("/{kind}/{record_id}", response_model=VerifiableRecordResponse)
async def update_verification_status(
    request: Request,
    kind: str,
    record_id: uuid.UUID,
    data: StatusUpdateRequest,
    actor: CurrentActor,
    db: DbSession,
):
    """
    Verify, reject or reopen a record.

    Rejections must carry feedback.
    """
    view = await VerificationEngine(db).set_status(
        actor,
        kind,
        record_id,
        data.status,
        feedback=data.feedback,
        ip_address=get_client_ip(request),
    )
    return VerifiableRecordResponse.from_view(view)


@router.get("/{kind}/{record_id}/history", response_model=List[VerificationEventResponse])
async def get_verification_history(
    kind: str,
    record_id: uuid.UUID,
    actor: CurrentActor,
    db: DbSession,
):
    """Review decisions and resets for one record, newest first."""
    events = await VerificationEngine(db).record_history(actor, kind, record_id)
    return [VerificationEventResponse.model_validate(e) for e in events]
