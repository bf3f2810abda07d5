"""Person interest and recommendation API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from affinity.dependencies.engine import get_recommendation_service
from affinity.engine.errors import InvalidLevel, PersonNotFound, StoreError, UnknownInterest
from affinity.engine.service import RecommendationService
from affinity.engine.types import Failure, FailureKind, NoInterests, Selection
from affinity.models.base import get_db
from affinity.models.person import Person
from affinity.schemas.person_interest import PersonInterestRead, PersonInterestsUpdate
from affinity.schemas.recommendation import RecommendationRead, RecommendationsResponse
from affinity.services.person_interest_service import (
    get_person,
    list_person_interests,
    replace_person_interests,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/persons", tags=["persons"])

FAILURE_STATUS = {
    FailureKind.STORE_UNAVAILABLE: 503,
    FailureKind.TIMEOUT: 504,
}


@router.get("/{person_id}/interests", response_model=list[PersonInterestRead])
async def get_person_interests(
    person_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a person's interest selections."""
    try:
        return await list_person_interests(db, person_id)
    except PersonNotFound:
        raise HTTPException(status_code=404, detail="Person not found")


@router.put("/{person_id}/interests", response_model=list[PersonInterestRead])
async def put_person_interests(
    person_id: int,
    data: PersonInterestsUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Replace a person's interests; their interest vector is recomputed in the same transaction."""
    selections = [Selection(interest_id=i.interest_id, level=i.level) for i in data.interests]
    try:
        interests = await replace_person_interests(db, person_id, selections)
    except PersonNotFound:
        raise HTTPException(status_code=404, detail="Person not found")
    except UnknownInterest as e:
        raise HTTPException(status_code=400, detail=f"Invalid interest ID: {e.interest_id}")
    except (InvalidLevel, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreError as e:
        logger.warning("Interest update failed for person %s: %s", person_id, e)
        raise HTTPException(status_code=503, detail="Interest store unavailable")

    # Commit before responding so the next request reads the new vector
    await db.commit()
    return interests


@router.get("/{person_id}/recommendations", response_model=RecommendationsResponse)
async def get_person_recommendations(
    person_id: int,
    db: AsyncSession = Depends(get_db),
    service: RecommendationService = Depends(get_recommendation_service),
    limit: int | None = Query(None, ge=1, le=100, description="Maximum number of people to return"),
    exclude: list[int] = Query([], description="Person ids to leave out (e.g. existing connections)"),
):
    """People with the most similar interests, best match first."""
    try:
        await get_person(db, person_id)
    except PersonNotFound:
        raise HTTPException(status_code=404, detail="Person not found")

    outcome = await service.recommend(person_id, limit=limit, exclude_ids=exclude)

    if isinstance(outcome, NoInterests):
        return RecommendationsResponse(person_id=person_id, status="no_interests")
    if isinstance(outcome, Failure):
        logger.warning("Recommendations failed for person %s: %s", person_id, outcome.kind.value)
        raise HTTPException(status_code=FAILURE_STATUS.get(outcome.kind, 500), detail=outcome.detail or outcome.kind.value)
    results = outcome.results

    # Resolve person details; ranking order is preserved
    ids = [r.person_id for r in results]
    people = {}
    if ids:
        result = await db.execute(select(Person).where(Person.id.in_(ids)))
        people = {p.id: p for p in result.scalars().all()}

    items = []
    for r in results:
        person = people.get(r.person_id)
        if person is None:
            continue
        items.append(RecommendationRead(
            person_id=person.id,
            display_id=person.display_id,
            first_name=person.first_name,
            last_name=person.last_name,
            pronouns=person.pronouns,
            similarity=r.similarity_score,
        ))

    return RecommendationsResponse(person_id=person_id, status="ok", items=items)
