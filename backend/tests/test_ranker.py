"""Tests for cosine similarity and ranking."""

import pytest

from affinity.engine.ranker import cosine_similarity, rank
from affinity.engine.types import InterestVector


def vec(components: dict[int, float], dimension: int = 6) -> InterestVector:
    return InterestVector(dimension=dimension, components=components)


def test_self_similarity_is_one():
    for components in ({0: 0.8, 1: 0.6}, {3: 0.01}, {0: 1.0, 2: 0.33, 5: 0.7}):
        v = vec(components)
        assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_disjoint_vectors_score_zero():
    assert cosine_similarity(vec({0: 0.8}), vec({2: 0.4})) == 0.0


def test_zero_magnitude_scores_zero():
    assert cosine_similarity(vec({0: 0.8}), vec({})) == 0.0


def test_similarity_is_scale_invariant():
    assert cosine_similarity(vec({0: 0.8, 1: 0.4}), vec({0: 0.4, 1: 0.2})) == pytest.approx(1.0)


def test_vectors_of_different_dimension_compare():
    old = vec({0: 0.5}, dimension=2)
    new = vec({0: 0.5, 4: 0.5}, dimension=5)
    assert cosine_similarity(old, new) == pytest.approx(1 / 2 ** 0.5)


def test_identical_interests_rank_first_with_score_one():
    p = vec({0: 0.8, 1: 0.6})
    candidates = {
        2: vec({0: 0.8, 1: 0.6}),
        3: vec({0: 0.8}),
        4: vec({1: 0.6, 2: 0.9}),
    }

    results = rank(p, candidates, limit=5, query_person_id=1)

    assert results[0].person_id == 2
    assert results[0].similarity_score == pytest.approx(1.0)
    assert all(0.0 < r.similarity_score <= 1.0 for r in results)


def test_disjoint_candidate_is_excluded():
    results = rank(vec({0: 0.8}), {2: vec({2: 0.4})}, limit=5, query_person_id=1)
    assert results == []


def test_order_is_descending_score_then_ascending_id():
    query = vec({0: 1.0})
    candidates = {
        9: vec({0: 0.5, 1: 0.5}),
        4: vec({0: 0.5, 1: 0.5}),
        7: vec({0: 1.0}),
        1: vec({0: 0.2, 1: 0.9}),
        5: vec({0: 0.5, 1: 0.5}),
    }

    results = rank(query, candidates, limit=10)

    assert [r.person_id for r in results] == [7, 4, 5, 9, 1]
    scores = [r.similarity_score for r in results]
    assert scores == sorted(scores, reverse=True)


def test_query_person_and_excluded_ids_are_removed():
    query = vec({0: 1.0})
    candidates = {pid: vec({0: 1.0}) for pid in range(1, 6)}

    results = rank(query, candidates, exclude_ids={2, 4}, limit=10, query_person_id=1)

    assert [r.person_id for r in results] == [3, 5]


def test_limit_returns_highest_scores():
    query = vec({0: 1.0, 1: 1.0})
    candidates = {pid: vec({0: 1.0, 1: pid / 10}) for pid in range(1, 11)}

    results = rank(query, candidates, limit=3)

    assert [r.person_id for r in results] == [10, 9, 8]


def test_fewer_candidates_than_limit_returns_all():
    results = rank(vec({0: 1.0}), {2: vec({0: 0.3}), 3: vec({0: 0.9, 1: 0.1})}, limit=10)
    assert len(results) == 2


def test_absent_and_zero_magnitude_candidates_are_skipped():
    candidates = {2: None, 3: vec({}), 4: vec({0: 0.5})}
    results = rank(vec({0: 1.0}), candidates, limit=10)
    assert [r.person_id for r in results] == [4]


def test_non_positive_limit_returns_nothing():
    assert rank(vec({0: 1.0}), {2: vec({0: 1.0})}, limit=0) == []
