"""Interest affinity engine: encoding, vector storage, similarity ranking, recommendations."""

from affinity.engine.encoder import encode
from affinity.engine.errors import (
    AffinityError,
    InvalidLevel,
    PersonNotFound,
    StoreError,
    StoreUnavailable,
    UnknownInterest,
)
from affinity.engine.ranker import cosine_similarity, rank
from affinity.engine.service import RecommendationService
from affinity.engine.store import InMemoryVectorStore, VectorStore
from affinity.engine.types import (
    CatalogSnapshot,
    Failure,
    FailureKind,
    InterestVector,
    NoInterests,
    RecommendationOutcome,
    RecommendationResult,
    Recommendations,
    Selection,
)

__all__ = [
    # Encoding
    "encode",
    "InterestVector",
    "Selection",
    "CatalogSnapshot",
    # Storage
    "VectorStore",
    "InMemoryVectorStore",
    # Ranking
    "rank",
    "cosine_similarity",
    "RecommendationResult",
    # Service
    "RecommendationService",
    "RecommendationOutcome",
    "Recommendations",
    "NoInterests",
    "Failure",
    "FailureKind",
    # Errors
    "AffinityError",
    "InvalidLevel",
    "UnknownInterest",
    "StoreError",
    "StoreUnavailable",
    "PersonNotFound",
]
