"""
Owner-side record endpoints.

The body schema depends on the kind in the path, so bodies arrive as raw
JSON and are validated against the kind's schema here.
"""

import uuid
from typing import Any, Dict

from fastapi import APIRouter, Body, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as PydanticValidationError

from practicum.api.deps import CurrentActor, DbSession, get_client_ip
from practicum.engines.records.record_service import RecordService
from practicum.engines.verification.types import parse_kind
from practicum.schemas.records import CREATE_SCHEMAS, UPDATE_SCHEMAS, RecordResponse

router = APIRouter()


def _parse_body(schema, body: Dict[str, Any], exclude_unset: bool) -> Dict[str, Any]:
    try:
        parsed = schema.model_validate(body)
    except PydanticValidationError as e:
        raise RequestValidationError(e.errors())
    return parsed.model_dump(exclude_unset=exclude_unset)


@router.post("/{kind}", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    request: Request,
    kind: str,
    actor: CurrentActor,
    db: DbSession,
    body: Dict[str, Any] = Body(...),
):
    """Create a record; it starts out pending review."""
    record_kind = parse_kind(kind)
    data = _parse_body(CREATE_SCHEMAS[record_kind], body, exclude_unset=False)
    if data.get("owner_id") is None:
        data.pop("owner_id", None)

    service = RecordService(db)
    record = await service.create(actor, record_kind, data, ip_address=get_client_ip(request))
    return RecordResponse(**service.serialize(record_kind, record))


@router.patch("/{kind}/{record_id}", response_model=RecordResponse)
async def update_record(
    request: Request,
    kind: str,
    record_id: uuid.UUID,
    actor: CurrentActor,
    db: DbSession,
    body: Dict[str, Any] = Body(...),
):
    """
    Edit a record. Only fields present in the body change.

    An edit by the owner sends a reviewed record back to pending.
    """
    record_kind = parse_kind(kind)
    changes = _parse_body(UPDATE_SCHEMAS[record_kind], body, exclude_unset=True)

    service = RecordService(db)
    record = await service.update(
        actor, record_kind, record_id, changes, ip_address=get_client_ip(request)
    )
    return RecordResponse(**service.serialize(record_kind, record))
