"""Vector encoder: maps a person's weighted interests to a sparse vector."""

import math
from typing import Iterable, Protocol

from affinity.engine.errors import InvalidLevel, UnknownInterest
from affinity.engine.types import InterestVector, Selection


class InterestCatalog(Protocol):
    def get_catalog_position(self, interest_id: int) -> int | None: ...

    def get_catalog_size(self) -> int: ...


def encode(selections: Iterable[Selection], catalog: InterestCatalog) -> InterestVector | None:
    """Encode selections into an InterestVector, or None when the person has none.

    Levels are validated upstream; an out-of-range level here raises InvalidLevel.
    A selection whose level is 0 contributes nothing, so a set made only of
    zero levels encodes to None rather than a zero vector.
    """
    components: dict[int, float] = {}
    seen: set[int] = set()

    for selection in selections:
        level = float(selection.level)
        if math.isnan(level) or level < 0.0 or level > 1.0:
            raise InvalidLevel(selection.interest_id, selection.level)
        if selection.interest_id in seen:
            raise ValueError(f"Duplicate selection for interest {selection.interest_id}")
        seen.add(selection.interest_id)

        position = catalog.get_catalog_position(selection.interest_id)
        if position is None:
            raise UnknownInterest(selection.interest_id)
        if level > 0.0:
            components[position] = level

    if not components:
        return None

    dimension = max(catalog.get_catalog_size(), max(components) + 1)
    return InterestVector(dimension=dimension, components=dict(sorted(components.items())))
