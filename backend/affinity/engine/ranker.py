"""Similarity ranker: cosine similarity and deterministic top-K selection."""

import heapq
from typing import Collection, Mapping

from affinity.engine.types import InterestVector, RecommendationResult


def dot(a: InterestVector, b: InterestVector) -> float:
    # Iterate over the sparser side
    if len(a.components) > len(b.components):
        a, b = b, a
    return sum(value * b.value_at(pos) for pos, value in a.components.items())


def cosine_similarity(a: InterestVector, b: InterestVector) -> float:
    """dot(a, b) / (|a| * |b|); 0.0 when either side has zero magnitude."""
    norm = a.magnitude * b.magnitude
    if norm == 0.0:
        return 0.0
    # Clamp float drift so identical vectors score exactly within [0, 1]
    return max(0.0, min(1.0, dot(a, b) / norm))


def rank(
    query: InterestVector,
    candidates: Mapping[int, InterestVector | None],
    exclude_ids: Collection[int] = (),
    limit: int = 5,
    query_person_id: int | None = None,
) -> list[RecommendationResult]:
    """Rank candidates by similarity to the query vector.

    Excluded ids, the querying person, absent or zero-magnitude vectors and
    candidates with no overlap (score 0) are dropped. Output is sorted by
    descending score, ties broken by ascending person id.
    """
    if limit < 1:
        return []

    query_magnitude = query.magnitude
    if query_magnitude == 0.0:
        return []

    excluded = set(exclude_ids)
    if query_person_id is not None:
        excluded.add(query_person_id)

    scored = []
    for person_id, vector in candidates.items():
        if person_id in excluded or vector is None:
            continue
        magnitude = vector.magnitude
        if magnitude == 0.0:
            continue
        score = max(0.0, min(1.0, dot(query, vector) / (query_magnitude * magnitude)))
        if score <= 0.0:
            continue
        scored.append((person_id, score))

    top = heapq.nsmallest(limit, scored, key=lambda item: (-item[1], item[0]))
    return [RecommendationResult(person_id=pid, similarity_score=score) for pid, score in top]
