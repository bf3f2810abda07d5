"""Vector store interface and the embedded in-memory implementation."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Iterable

from affinity.engine.types import InterestVector

logger = logging.getLogger(__name__)


class VectorStore(ABC):
    """Persists the latest interest vector per person.

    Subclasses must implement:
        set(person_id, vector): store, or clear when vector is None; atomic per person
        get(person_id): stored vector or None
        get_many(person_ids): {person_id: vector or None} for every requested id
        candidates(): every present vector (the candidate pool)

    Backing-medium failures are raised as StoreUnavailable (transient) or
    StoreError.
    """

    @abstractmethod
    async def set(self, person_id: int, vector: InterestVector | None) -> None:
        ...

    @abstractmethod
    async def get(self, person_id: int) -> InterestVector | None:
        ...

    @abstractmethod
    async def get_many(self, person_ids: Iterable[int]) -> dict[int, InterestVector | None]:
        ...

    @abstractmethod
    async def candidates(self) -> dict[int, InterestVector]:
        ...


class InMemoryVectorStore(VectorStore):
    """Dict-backed store with a lock per person serializing writes."""

    def __init__(self):
        self._vectors: dict[int, InterestVector] = {}
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def set(self, person_id: int, vector: InterestVector | None) -> None:
        async with self._locks[person_id]:
            if vector is None:
                self._vectors.pop(person_id, None)
                logger.debug("Cleared interest vector for person %s", person_id)
            else:
                self._vectors[person_id] = vector
                logger.debug(
                    "Stored interest vector for person %s (%d components)",
                    person_id, len(vector.components),
                )

    async def get(self, person_id: int) -> InterestVector | None:
        return self._vectors.get(person_id)

    async def get_many(self, person_ids: Iterable[int]) -> dict[int, InterestVector | None]:
        return {pid: self._vectors.get(pid) for pid in person_ids}

    async def candidates(self) -> dict[int, InterestVector]:
        # Copy so callers rank over a consistent snapshot
        return dict(self._vectors)
