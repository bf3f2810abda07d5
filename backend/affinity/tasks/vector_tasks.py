"""Celery tasks for interest vector maintenance.

Interactive edits recompute vectors in their own transaction; this sweep
only repairs drift (backfills after migrations, manual data fixes).
"""

import logging

from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from affinity.config import get_settings
from affinity.engine.encoder import encode
from affinity.engine.errors import AffinityError
from affinity.engine.types import CatalogSnapshot, InterestVector, Selection
from affinity.models.base import SyncSessionLocal
from affinity.models.interest import Interest
from affinity.models.person import Person
from affinity.models.person_interest import PersonInterest
from affinity.models.person_interest_vector import PersonInterestVector
from affinity.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


def load_catalog(session: Session) -> CatalogSnapshot:
    rows = session.execute(select(Interest.id, Interest.catalog_position)).all()
    positions = {row.id: row.catalog_position for row in rows}
    size = max(positions.values()) + 1 if positions else 0
    return CatalogSnapshot(positions=positions, size=size)


def rebuild_person_vector(session: Session, person_id: int, catalog: CatalogSnapshot) -> bool:
    """Re-derive one person's vector under their row lock. Returns True if it changed."""
    locked = session.execute(
        select(Person.id).where(Person.id == person_id).with_for_update()
    ).scalar_one_or_none()
    if locked is None:
        return False

    selections = [
        Selection(interest_id=row.interest_id, level=float(row.level))
        for row in session.execute(
            select(PersonInterest.interest_id, PersonInterest.level)
            .where(PersonInterest.person_id == person_id)
        )
    ]
    vector = encode(selections, catalog)
    row = session.get(PersonInterestVector, person_id)

    if vector is None:
        if row is None:
            return False
        session.execute(delete(PersonInterestVector).where(PersonInterestVector.person_id == person_id))
        return True

    if row is not None and InterestVector.from_json(row.components, row.dimension) == vector:
        return False

    if row is None:
        row = PersonInterestVector(person_id=person_id)
        session.add(row)
    row.components = vector.to_json()
    row.dimension = vector.dimension
    return True


@celery_app.task(name="affinity.tasks.vector_tasks.rebuild_interest_vectors")
def rebuild_interest_vectors(batch_size: int | None = None) -> dict:
    """Recompute every person's interest vector from their current selections.

    Each person is committed separately so a long sweep never holds more
    than one row lock at a time.
    """
    batch_size = batch_size or get_settings().vector_rebuild_batch_size
    scanned = updated = failed = 0
    last_id = 0

    with SyncSessionLocal() as session:
        catalog = load_catalog(session)
        session.commit()

        while True:
            person_ids = session.execute(
                select(Person.id)
                .where(Person.id > last_id)
                .order_by(Person.id)
                .limit(batch_size)
            ).scalars().all()
            session.commit()
            if not person_ids:
                break

            for person_id in person_ids:
                scanned += 1
                try:
                    if rebuild_person_vector(session, person_id, catalog):
                        updated += 1
                    session.commit()
                except AffinityError:
                    session.rollback()
                    failed += 1
                    logger.exception("Failed to rebuild interest vector for person %s", person_id)
                except Exception:
                    session.rollback()
                    logger.exception("Interest vector rebuild aborted at person %s", person_id)
                    raise

            last_id = person_ids[-1]

    logger.info("Rebuilt interest vectors: %d scanned, %d updated, %d failed", scanned, updated, failed)
    return {"scanned": scanned, "updated": updated, "failed": failed}
