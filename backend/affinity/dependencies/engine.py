"""Engine dependencies for FastAPI routes."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from affinity.engine.service import RecommendationService
from affinity.models.base import get_db
from affinity.services.interest_catalog_service import SqlInterestCatalog
from affinity.services.person_interest_service import SqlSelectionSource
from affinity.services.vector_store_service import SqlVectorStore


async def get_recommendation_service(db: AsyncSession = Depends(get_db)) -> RecommendationService:
    """Recommendation service bound to the request's session."""
    return RecommendationService(
        selections=SqlSelectionSource(db),
        catalog=SqlInterestCatalog(db),
        store=SqlVectorStore(db),
    )
