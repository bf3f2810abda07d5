"""Value types shared by the encoder, store, ranker and service."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Union


@dataclass(frozen=True)
class Selection:
    """One weighted interest held by a person."""

    interest_id: int
    level: float


@dataclass(frozen=True)
class InterestVector:
    """Sparse interest vector indexed by catalog position.

    Only positive components are stored; every other position up to
    ``dimension`` (and beyond it, for interests added later) reads as zero.
    """

    dimension: int
    components: Mapping[int, float] = field(default_factory=dict)

    def value_at(self, position: int) -> float:
        return self.components.get(position, 0.0)

    @property
    def values(self) -> tuple[float, ...]:
        """Dense view of the vector."""
        return tuple(self.value_at(i) for i in range(self.dimension))

    @property
    def magnitude(self) -> float:
        return math.sqrt(sum(v * v for v in self.components.values()))

    def to_json(self) -> dict[str, float]:
        return {str(pos): value for pos, value in sorted(self.components.items())}

    @classmethod
    def from_json(cls, components: Mapping[str, float], dimension: int) -> InterestVector:
        return cls(
            dimension=dimension,
            components={int(pos): float(value) for pos, value in components.items()},
        )


@dataclass(frozen=True)
class CatalogSnapshot:
    """Point-in-time view of the interest catalog used for encoding."""

    positions: Mapping[int, int]
    size: int

    def get_catalog_position(self, interest_id: int) -> int | None:
        return self.positions.get(interest_id)

    def get_catalog_size(self) -> int:
        return self.size


@dataclass(frozen=True)
class RecommendationResult:
    person_id: int
    similarity_score: float


# --- Service outcomes ---

class FailureKind(str, Enum):
    STORE_UNAVAILABLE = "store_unavailable"
    TIMEOUT = "timeout"
    INVALID_LEVEL = "invalid_level"
    UNKNOWN_INTEREST = "unknown_interest"


@dataclass(frozen=True)
class Recommendations:
    results: list[RecommendationResult]


@dataclass(frozen=True)
class NoInterests:
    """The requester has no interest selections; prompt them to add some."""

    person_id: int


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    detail: str = ""

    @property
    def retryable(self) -> bool:
        return self.kind in (FailureKind.STORE_UNAVAILABLE, FailureKind.TIMEOUT)


RecommendationOutcome = Union[Recommendations, NoInterests, Failure]
