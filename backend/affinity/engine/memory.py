"""In-memory collaborators for embedding the engine without a database."""

import asyncio
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable

from affinity.engine.encoder import encode
from affinity.engine.errors import UnknownInterest
from affinity.engine.store import VectorStore
from affinity.engine.types import CatalogSnapshot, Selection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogEntry:
    id: int
    name: str
    category: str
    catalog_position: int
    deleted: bool = False


class InMemoryInterestCatalog:
    """Catalog that assigns dense, never-reused positions in insertion order."""

    def __init__(self):
        self._entries: dict[int, CatalogEntry] = {}
        self._next_id = 1

    def add(self, name: str, category: str) -> CatalogEntry:
        entry = CatalogEntry(
            id=self._next_id,
            name=name,
            category=category,
            catalog_position=len(self._entries),
        )
        self._entries[entry.id] = entry
        self._next_id += 1
        return entry

    def remove(self, interest_id: int) -> None:
        """Hide an interest from new selections; its position stays reserved."""
        entry = self._entries.get(interest_id)
        if entry is None:
            raise UnknownInterest(interest_id)
        self._entries[interest_id] = CatalogEntry(
            id=entry.id,
            name=entry.name,
            category=entry.category,
            catalog_position=entry.catalog_position,
            deleted=True,
        )

    def is_selectable(self, interest_id: int) -> bool:
        entry = self._entries.get(interest_id)
        return entry is not None and not entry.deleted

    async def snapshot(self) -> CatalogSnapshot:
        return CatalogSnapshot(
            positions={e.id: e.catalog_position for e in self._entries.values()},
            size=len(self._entries),
        )


class InMemorySelectionSource:
    def __init__(self):
        self._selections: dict[int, list[Selection]] = {}

    async def get_person_interest_selections(self, person_id: int) -> list[Selection]:
        return list(self._selections.get(person_id, ()))

    def put(self, person_id: int, selections: list[Selection]) -> None:
        if selections:
            self._selections[person_id] = list(selections)
        else:
            self._selections.pop(person_id, None)


class InMemoryInterestEditor:
    """Replaces a person's selections and recomputes their vector as one unit of work.

    Edits for the same person are serialized; the vector written always
    matches the last committed selection set.
    """

    def __init__(
        self,
        catalog: InMemoryInterestCatalog,
        selections: InMemorySelectionSource,
        store: VectorStore,
    ):
        self.catalog = catalog
        self.selections = selections
        self.store = store
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def replace(self, person_id: int, selections: Iterable[Selection]) -> None:
        new_selections = list(selections)
        for selection in new_selections:
            if not self.catalog.is_selectable(selection.interest_id):
                raise UnknownInterest(selection.interest_id)

        async with self._locks[person_id]:
            # Encode first so an invalid set leaves both sides untouched
            vector = encode(new_selections, await self.catalog.snapshot())
            self.selections.put(person_id, new_selections)
            await self.store.set(person_id, vector)

        logger.debug("Replaced %d interest selections for person %s", len(new_selections), person_id)
