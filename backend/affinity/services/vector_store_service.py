"""SQL vector store: one JSON row of sparse components per person."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable

from sqlalchemy import select, delete
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from affinity.engine.errors import StoreError, StoreUnavailable
from affinity.engine.store import VectorStore
from affinity.engine.types import InterestVector
from affinity.models.base import reset_session
from affinity.models.person import Person
from affinity.models.person_interest_vector import PersonInterestVector

logger = logging.getLogger(__name__)


TRANSIENT_ERRORS = (OperationalError, InterfaceError)


@asynccontextmanager
async def store_errors(db: AsyncSession) -> AsyncIterator[None]:
    """Translate database failures into engine store errors.

    Connection-level failures become StoreUnavailable and anything else
    SQLAlchemy raises becomes StoreError. The session is rolled back first,
    so a retry on the same session starts on a clean connection.
    """
    try:
        yield
    except SQLAlchemyError as e:
        try:
            await reset_session(db)
        except SQLAlchemyError as rollback_error:
            raise StoreUnavailable(f"Database unavailable: {rollback_error}") from e

        if isinstance(e, TRANSIENT_ERRORS) or getattr(e, "connection_invalidated", False):
            raise StoreUnavailable(f"Database unavailable: {getattr(e, 'orig', None) or e}") from e
        raise StoreError(f"Database error: {e}") from e


async def lock_person(db: AsyncSession, person_id: int) -> bool:
    """Take the per-person row lock that serializes vector writes.

    Held until the surrounding transaction ends. Returns False when the
    person does not exist.
    """
    result = await db.execute(
        select(Person.id).where(Person.id == person_id).with_for_update()
    )
    return result.scalar_one_or_none() is not None


class SqlVectorStore(VectorStore):
    """Vector store bound to the caller's session and transaction.

    Writes are flushed, not committed: the caller's unit of work decides
    when the new vector becomes visible.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def set(self, person_id: int, vector: InterestVector | None) -> None:
        async with store_errors(self.db):
            await lock_person(self.db, person_id)

            if vector is None:
                await self.db.execute(
                    delete(PersonInterestVector).where(PersonInterestVector.person_id == person_id)
                )
                await self.db.flush()
                logger.debug("Cleared interest vector for person %s", person_id)
                return

            row = await self.db.get(PersonInterestVector, person_id)
            if row is None:
                row = PersonInterestVector(person_id=person_id)
                self.db.add(row)
            row.components = vector.to_json()
            row.dimension = vector.dimension
            await self.db.flush()
            logger.debug(
                "Stored interest vector for person %s (%d components, dimension %d)",
                person_id, len(vector.components), vector.dimension,
            )

    async def get(self, person_id: int) -> InterestVector | None:
        async with store_errors(self.db):
            result = await self.db.execute(
                select(PersonInterestVector.components, PersonInterestVector.dimension)
                .where(PersonInterestVector.person_id == person_id)
            )
            row = result.one_or_none()
        if row is None:
            return None
        return InterestVector.from_json(row.components, row.dimension)

    async def get_many(self, person_ids: Iterable[int]) -> dict[int, InterestVector | None]:
        ids = list(dict.fromkeys(person_ids))
        vectors: dict[int, InterestVector | None] = {pid: None for pid in ids}
        if not ids:
            return vectors

        async with store_errors(self.db):
            result = await self.db.execute(
                select(
                    PersonInterestVector.person_id,
                    PersonInterestVector.components,
                    PersonInterestVector.dimension,
                ).where(PersonInterestVector.person_id.in_(ids))
            )
            for row in result:
                vectors[row.person_id] = InterestVector.from_json(row.components, row.dimension)
        return vectors

    async def candidates(self) -> dict[int, InterestVector]:
        """All present vectors belonging to non-deleted people."""
        async with store_errors(self.db):
            result = await self.db.execute(
                select(
                    PersonInterestVector.person_id,
                    PersonInterestVector.components,
                    PersonInterestVector.dimension,
                )
                .join(Person, Person.id == PersonInterestVector.person_id)
                .where(Person.deleted == False)
            )
            return {
                row.person_id: InterestVector.from_json(row.components, row.dimension)
                for row in result
            }
