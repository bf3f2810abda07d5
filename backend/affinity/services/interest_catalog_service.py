"""Interest catalog service: stable catalog positions for vector encoding."""

import logging

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from affinity.engine.errors import UnknownInterest
from affinity.engine.types import CatalogSnapshot
from affinity.models.interest import Interest
from affinity.services.vector_store_service import store_errors

logger = logging.getLogger(__name__)


class InterestAlreadyExists(Exception):
    pass


class InterestAlreadyDeleted(Exception):
    pass


class CategoryNotFound(Exception):
    pass


class CategoryAlreadyExists(Exception):
    pass


class SqlInterestCatalog:
    """Catalog snapshot loader.

    Deleted interests keep their position in the snapshot so stored vectors
    that still reference them stay decodable.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def snapshot(self) -> CatalogSnapshot:
        async with store_errors(self.db):
            result = await self.db.execute(select(Interest.id, Interest.catalog_position))
            positions = {row.id: row.catalog_position for row in result}
        size = max(positions.values()) + 1 if positions else 0
        return CatalogSnapshot(positions=positions, size=size)


async def list_interests(
    db: AsyncSession,
    category: str | None = None,
    skip: int = 0,
    limit: int | None = None,
) -> list[Interest]:
    """Non-deleted interests, ordered by category then name."""
    query = select(Interest).where(Interest.deleted == False)
    if category:
        query = query.where(Interest.category == category)
    query = query.order_by(Interest.category, Interest.name, Interest.id).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def count_interests(db: AsyncSession, category: str | None = None) -> int:
    query = select(func.count(Interest.id)).where(Interest.deleted == False)
    if category:
        query = query.where(Interest.category == category)
    return (await db.execute(query)).scalar() or 0


async def _live_interest_exists(db: AsyncSession, name: str, category: str, exclude_id: int | None = None) -> bool:
    query = select(Interest.id).where(
        Interest.name == name,
        Interest.category == category,
        Interest.deleted == False,
    )
    if exclude_id is not None:
        query = query.where(Interest.id != exclude_id)
    return (await db.execute(query.limit(1))).scalar_one_or_none() is not None


async def _category_exists(db: AsyncSession, category: str) -> bool:
    query = select(Interest.id).where(Interest.category == category, Interest.deleted == False)
    return (await db.execute(query.limit(1))).scalar_one_or_none() is not None


async def create_interest(db: AsyncSession, name: str, category: str) -> Interest:
    """Add an interest at the next catalog position.

    Positions are never reused, so the next one is one past the highest
    ever assigned, deleted interests included.
    """
    name = name.strip()
    category = category.strip()

    if await _live_interest_exists(db, name, category):
        raise InterestAlreadyExists(f"Interest '{name}' already exists in category '{category}'")

    max_position = (await db.execute(select(func.max(Interest.catalog_position)))).scalar()
    next_position = 0 if max_position is None else max_position + 1

    interest = Interest(name=name, category=category, catalog_position=next_position)
    db.add(interest)
    await db.flush()

    logger.info("Created interest %s '%s/%s' at catalog position %d", interest.id, category, name, next_position)
    return interest


async def delete_interest(db: AsyncSession, interest_id: int) -> Interest:
    """Soft-delete an interest. Its catalog position is never reassigned."""
    interest = await db.get(Interest, interest_id)
    if interest is None:
        raise UnknownInterest(interest_id)
    if interest.deleted:
        raise InterestAlreadyDeleted(f"Interest {interest_id} is already deleted")

    interest.deleted = True
    await db.flush()

    logger.info("Deleted interest %s (catalog position %d stays reserved)", interest_id, interest.catalog_position)
    return interest


async def update_interest(db: AsyncSession, interest_id: int, name: str, category: str) -> Interest:
    """Rename or recategorize a live interest. Its catalog position does not change."""
    interest = await db.get(Interest, interest_id)
    if interest is None:
        raise UnknownInterest(interest_id)
    if interest.deleted:
        raise InterestAlreadyDeleted(f"Cannot update deleted interest {interest_id}")

    name = name.strip()
    category = category.strip()
    if await _live_interest_exists(db, name, category, exclude_id=interest_id):
        raise InterestAlreadyExists(f"Interest '{name}' already exists in category '{category}'")

    interest.name = name
    interest.category = category
    await db.flush()

    logger.info("Updated interest %s to '%s/%s'", interest_id, category, name)
    return interest


async def list_categories(db: AsyncSession) -> list[str]:
    """Distinct categories that still have live interests."""
    result = await db.execute(
        select(Interest.category)
        .where(Interest.deleted == False)
        .distinct()
        .order_by(Interest.category)
    )
    return list(result.scalars().all())


async def rename_category(db: AsyncSession, old_name: str, new_name: str) -> int:
    """Move every live interest in old_name to new_name. Returns how many moved."""
    new_name = new_name.strip()
    if not new_name:
        raise ValueError("New category name is required")
    if not await _category_exists(db, old_name):
        raise CategoryNotFound(f"Category '{old_name}' not found")
    if new_name != old_name and await _category_exists(db, new_name):
        raise CategoryAlreadyExists(f"Category '{new_name}' already exists")

    result = await db.execute(
        update(Interest)
        .where(Interest.category == old_name, Interest.deleted == False)
        .values(category=new_name)
    )
    await db.flush()

    logger.info("Renamed category '%s' to '%s' (%d interests)", old_name, new_name, result.rowcount)
    return result.rowcount


async def delete_category(db: AsyncSession, name: str) -> int:
    """Soft-delete every live interest in a category. Returns how many were deleted.

    Catalog positions stay reserved, as with single-interest deletes.
    """
    if not await _category_exists(db, name):
        raise CategoryNotFound(f"Category '{name}' not found")

    result = await db.execute(
        update(Interest)
        .where(Interest.category == name, Interest.deleted == False)
        .values(deleted=True)
    )
    await db.flush()

    logger.info("Deleted category '%s' (%d interests)", name, result.rowcount)
    return result.rowcount
