"""
Competency catalog endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from practicum.api.deps import CurrentActor, DbSession
from practicum.engines.records.catalog import CompetencyCatalog
from practicum.schemas.records import CompetencyCreate, CompetencyResponse

router = APIRouter()


@router.get("", response_model=List[CompetencyResponse])
async def list_competencies(
    actor: CurrentActor,
    db: DbSession,
    category: Optional[str] = Query(None),
):
    competencies = await CompetencyCatalog(db).list_competencies(actor, category=category)
    return [CompetencyResponse.model_validate(c) for c in competencies]


@router.post("", response_model=CompetencyResponse, status_code=status.HTTP_201_CREATED)
async def create_competency(
    data: CompetencyCreate,
    actor: CurrentActor,
    db: DbSession,
):
    """Add a catalog entry (admin only)."""
    competency = await CompetencyCatalog(db).create_competency(
        actor, name=data.name, category=data.category, description=data.description
    )
    return CompetencyResponse.model_validate(competency)
