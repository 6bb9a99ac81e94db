"""Request-scoped dependencies — one store and manager per request session."""

from typing import Annotated

from fastapi import Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.core.domain_types import MAX_ENTITY_ID
from relations_api.infrastructure.database import get_db
from relations_api.services.entity_store import SqlEntityStore
from relations_api.services.relationship_manager import RelationshipManager

# Out-of-range ids fail request validation (400) before any query runs
EntityIdPath = Annotated[int, Path(ge=1, le=MAX_ENTITY_ID)]


async def get_relationship_manager(
    db: AsyncSession = Depends(get_db),
) -> RelationshipManager:
    return RelationshipManager(SqlEntityStore(db))
