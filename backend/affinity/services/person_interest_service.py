"""Person interest service: selection edits and the vector recompute that follows them.

Replacing a person's selections and rewriting their vector happen in the
same transaction, under the person's row lock, so a caller who edits
interests and immediately asks for recommendations sees the new vector.
"""

import logging
from decimal import Decimal
from typing import Iterable

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from affinity.engine.encoder import encode
from affinity.engine.errors import InvalidLevel, PersonNotFound, UnknownInterest
from affinity.engine.types import InterestVector, Selection
from affinity.models.interest import Interest
from affinity.models.person import Person
from affinity.models.person_interest import PersonInterest
from affinity.services.interest_catalog_service import SqlInterestCatalog
from affinity.services.vector_store_service import SqlVectorStore, lock_person, store_errors

logger = logging.getLogger(__name__)


class SqlSelectionSource:
    """Reads a person's latest committed (or in-transaction) selections."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_person_interest_selections(self, person_id: int) -> list[Selection]:
        async with store_errors(self.db):
            result = await self.db.execute(
                select(PersonInterest.interest_id, PersonInterest.level)
                .where(PersonInterest.person_id == person_id)
                .order_by(PersonInterest.interest_id)
            )
            return [Selection(interest_id=row.interest_id, level=float(row.level)) for row in result]


async def get_person(db: AsyncSession, person_id: int) -> Person:
    person = (
        await db.execute(select(Person).where(Person.id == person_id, Person.deleted == False))
    ).scalar_one_or_none()
    if person is None:
        raise PersonNotFound(person_id)
    return person


async def list_person_interests(db: AsyncSession, person_id: int) -> list[PersonInterest]:
    """A person's selections with their interests loaded, ordered by interest name."""
    await get_person(db, person_id)
    result = await db.execute(
        select(PersonInterest)
        .join(Interest, Interest.id == PersonInterest.interest_id)
        .where(PersonInterest.person_id == person_id)
        .options(selectinload(PersonInterest.interest))
        .order_by(Interest.name)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def sync_person_vector(db: AsyncSession, person_id: int) -> InterestVector | None:
    """Recompute and store a person's vector from their current selections.

    Must run inside the transaction that changed the selections.
    """
    selections = await SqlSelectionSource(db).get_person_interest_selections(person_id)
    catalog = await SqlInterestCatalog(db).snapshot()
    vector = encode(selections, catalog)
    await SqlVectorStore(db).set(person_id, vector)
    return vector


async def replace_person_interests(
    db: AsyncSession,
    person_id: int,
    selections: Iterable[Selection],
) -> list[PersonInterest]:
    """Replace a person's full selection set and recompute their vector.

    Raises PersonNotFound for unknown or deleted people and UnknownInterest
    for interest ids that do not exist or are deleted. Nothing is written
    in either case.
    """
    selections = list(selections)
    seen: set[int] = set()
    for selection in selections:
        if not 0.0 <= selection.level <= 1.0:
            raise InvalidLevel(selection.interest_id, selection.level)
        if selection.interest_id in seen:
            raise ValueError(f"Duplicate selection for interest {selection.interest_id}")
        seen.add(selection.interest_id)

    # Row lock first: concurrent edits for this person queue here
    async with store_errors(db):
        if not await lock_person(db, person_id):
            raise PersonNotFound(person_id)
    await get_person(db, person_id)

    interest_ids = sorted(seen)
    if interest_ids:
        valid = await db.execute(
            select(Interest.id).where(Interest.id.in_(interest_ids), Interest.deleted == False)
        )
        valid_ids = set(valid.scalars().all())
        invalid_ids = [i for i in interest_ids if i not in valid_ids]
        if invalid_ids:
            raise UnknownInterest(invalid_ids[0])

    await db.execute(delete(PersonInterest).where(PersonInterest.person_id == person_id))
    for selection in selections:
        db.add(PersonInterest(
            person_id=person_id,
            interest_id=selection.interest_id,
            level=Decimal(f"{selection.level:.2f}"),
        ))
    await db.flush()

    vector = await sync_person_vector(db, person_id)

    logger.info(
        "Replaced interests for person %s (%d selections, vector %s)",
        person_id, len(selections), "stored" if vector is not None else "cleared",
    )
    return await list_person_interests(db, person_id)
