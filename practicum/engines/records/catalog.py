"""
Competency catalog.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from practicum.kernel.errors import Forbidden, Unauthenticated, ValidationError
from practicum.kernel.identity.actor import Actor
from practicum.kernel.models.records import Competency
from practicum.logging_config import get_logger

logger = get_logger(__name__)


class CompetencyCatalog:
    """Any signed-in user may browse the catalog; only admins extend it."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_competencies(self, actor: Optional[Actor], category: Optional[str] = None) -> List[Competency]:
        if actor is None:
            raise Unauthenticated("Not authenticated")
        query = select(Competency).order_by(Competency.category, Competency.name)
        if category:
            query = query.where(Competency.category == category)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def create_competency(
        self,
        actor: Optional[Actor],
        name: str,
        category: str,
        description: Optional[str] = None,
    ) -> Competency:
        """
        Raises:
            Forbidden: Non-admins
            ValidationError: Blank name/category, or a duplicate in the category
        """
        if actor is None:
            raise Unauthenticated("Not authenticated")
        if not actor.is_admin:
            raise Forbidden("Only admins can edit the competency catalog")

        name = (name or "").strip()
        category = (category or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        if not category:
            raise ValidationError("Category is required", field="category")

        existing = await self.session.execute(
            select(Competency.id).where(Competency.category == category, Competency.name == name)
        )
        if existing.first() is not None:
            raise ValidationError("Competency already exists in this category", field="name")

        competency = Competency(name=name, category=category, description=description)
        self.session.add(competency)
        await self.session.flush()
        await self.session.refresh(competency)

        logger.info("Competency added", extra={"competency_id": str(competency.id), "category": category})
        return competency
