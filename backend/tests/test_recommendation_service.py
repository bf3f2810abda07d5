"""Tests for the recommendation service over in-memory collaborators."""

import asyncio

import pytest

from affinity.engine.errors import StoreUnavailable
from affinity.engine.service import RecommendationService
from affinity.engine.store import InMemoryVectorStore
from affinity.engine.types import (
    Failure,
    FailureKind,
    NoInterests,
    Recommendations,
    Selection,
)

PHOTOGRAPHY, READING, COOKING, HIKING = 1, 2, 3, 4


def make_service(selections, catalog, store, **kwargs) -> RecommendationService:
    kwargs.setdefault("retry_backoff", 0.0)
    return RecommendationService(selections=selections, catalog=catalog, store=store, **kwargs)


def test_identical_interests_score_one(editor, selections, catalog, store):
    async def scenario():
        await editor.replace(1, [Selection(PHOTOGRAPHY, 0.8), Selection(READING, 0.6)])
        await editor.replace(2, [Selection(PHOTOGRAPHY, 0.8), Selection(READING, 0.6)])
        await editor.replace(3, [Selection(READING, 0.6), Selection(HIKING, 0.9)])
        return await make_service(selections, catalog, store).recommend(1)

    outcome = asyncio.run(scenario())

    assert isinstance(outcome, Recommendations)
    assert outcome.results[0].person_id == 2
    assert outcome.results[0].similarity_score == pytest.approx(1.0)


def test_disjoint_interests_are_not_recommended(editor, selections, catalog, store):
    async def scenario():
        await editor.replace(1, [Selection(PHOTOGRAPHY, 0.8)])
        await editor.replace(2, [Selection(COOKING, 0.4)])
        return await make_service(selections, catalog, store).recommend(1)

    assert asyncio.run(scenario()) == Recommendations(results=[])


def test_no_selections_returns_no_interests_without_store_lookup(selections, catalog):
    class UntouchableStore(InMemoryVectorStore):
        async def candidates(self):
            raise AssertionError("store must not be read")

    outcome = asyncio.run(make_service(selections, catalog, UntouchableStore()).recommend(1))

    assert outcome == NoInterests(person_id=1)


def test_only_zero_levels_returns_no_interests(editor, selections, catalog, store):
    async def scenario():
        await editor.replace(1, [Selection(PHOTOGRAPHY, 0.0)])
        return await make_service(selections, catalog, store).recommend(1)

    assert asyncio.run(scenario()) == NoInterests(person_id=1)


def test_deleting_all_interests_clears_vector(editor, selections, catalog, store):
    async def scenario():
        await editor.replace(1, [Selection(PHOTOGRAPHY, 0.8), Selection(READING, 0.6)])
        await editor.replace(2, [Selection(PHOTOGRAPHY, 0.5)])
        assert await store.get(1) is not None

        await editor.replace(1, [])
        return await store.get(1), await make_service(selections, catalog, store).recommend(1)

    vector, outcome = asyncio.run(scenario())

    assert vector is None
    assert isinstance(outcome, NoInterests)


def test_limit_returns_top_scores(editor, selections, catalog, store):
    async def scenario():
        await editor.replace(1, [Selection(PHOTOGRAPHY, 1.0), Selection(READING, 1.0)])
        for pid in range(2, 12):
            await editor.replace(pid, [Selection(PHOTOGRAPHY, 1.0), Selection(READING, (pid - 1) / 10)])
        return await make_service(selections, catalog, store).recommend(1, limit=3)

    outcome = asyncio.run(scenario())

    assert [r.person_id for r in outcome.results] == [11, 10, 9]


def test_default_and_maximum_limit(editor, selections, catalog, store):
    async def scenario():
        for pid in range(1, 20):
            await editor.replace(pid, [Selection(HIKING, 0.5)])
        service = make_service(selections, catalog, store, default_limit=5, max_limit=8)
        return await service.recommend(1), await service.recommend(1, limit=50)

    default, clamped = asyncio.run(scenario())

    assert len(default.results) == 5
    assert len(clamped.results) == 8
    # Equal scores: ascending person id, requester left out
    assert [r.person_id for r in default.results] == [2, 3, 4, 5, 6]


def test_invalid_limit_raises(selections, catalog, store):
    with pytest.raises(ValueError):
        asyncio.run(make_service(selections, catalog, store).recommend(1, limit=0))


def test_never_recommends_self_or_excluded(editor, selections, catalog, store):
    async def scenario():
        for pid in range(1, 6):
            await editor.replace(pid, [Selection(COOKING, 0.7)])
        return await make_service(selections, catalog, store).recommend(3, limit=10, exclude_ids={1, 5})

    outcome = asyncio.run(scenario())

    assert [r.person_id for r in outcome.results] == [2, 4]


def test_timeout_returns_failure_not_partial_results(editor, selections, catalog):
    class SlowStore(InMemoryVectorStore):
        async def candidates(self):
            await asyncio.sleep(1.0)
            return await super().candidates()

    store = SlowStore()
    slow_editor = type(editor)(catalog, selections, store)

    async def scenario():
        await slow_editor.replace(1, [Selection(PHOTOGRAPHY, 0.8)])
        await slow_editor.replace(2, [Selection(PHOTOGRAPHY, 0.8)])
        return await make_service(selections, catalog, store).recommend(1, timeout=0.05)

    outcome = asyncio.run(scenario())

    assert isinstance(outcome, Failure)
    assert outcome.kind is FailureKind.TIMEOUT
    assert outcome.retryable


class FlakyStore(InMemoryVectorStore):
    def __init__(self, failures: int):
        super().__init__()
        self.failures = failures
        self.calls = 0

    async def candidates(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise StoreUnavailable("connection refused")
        return await super().candidates()


def test_store_unavailable_is_retried_once(editor, selections, catalog):
    store = FlakyStore(failures=1)
    flaky_editor = type(editor)(catalog, selections, store)

    async def scenario():
        await flaky_editor.replace(1, [Selection(READING, 0.8)])
        await flaky_editor.replace(2, [Selection(READING, 0.3)])
        return await make_service(selections, catalog, store, retry_attempts=1).recommend(1)

    outcome = asyncio.run(scenario())

    assert isinstance(outcome, Recommendations)
    assert [r.person_id for r in outcome.results] == [2]
    assert store.calls == 2


def test_store_unavailable_after_retries_is_a_failure(editor, selections, catalog):
    store = FlakyStore(failures=5)
    flaky_editor = type(editor)(catalog, selections, store)

    async def scenario():
        await flaky_editor.replace(1, [Selection(READING, 0.8)])
        return await make_service(selections, catalog, store, retry_attempts=1).recommend(1)

    outcome = asyncio.run(scenario())

    assert outcome == Failure(FailureKind.STORE_UNAVAILABLE, "connection refused")
    assert store.calls == 2


def test_invalid_level_is_a_typed_failure(catalog, store):
    class BrokenSource:
        async def get_person_interest_selections(self, person_id):
            return [Selection(PHOTOGRAPHY, 1.5)]

    outcome = asyncio.run(make_service(BrokenSource(), catalog, store).recommend(1))

    assert isinstance(outcome, Failure)
    assert outcome.kind is FailureKind.INVALID_LEVEL
    assert not outcome.retryable


def test_unknown_interest_is_a_typed_failure(catalog, store):
    class StaleSource:
        async def get_person_interest_selections(self, person_id):
            return [Selection(404, 0.5)]

    outcome = asyncio.run(make_service(StaleSource(), catalog, store).recommend(1))

    assert outcome.kind is FailureKind.UNKNOWN_INTEREST


def test_recommend_does_not_write_vectors(editor, selections, catalog, store):
    async def scenario():
        await editor.replace(1, [Selection(PHOTOGRAPHY, 0.8)])
        await editor.replace(2, [Selection(PHOTOGRAPHY, 0.4)])
        before = await store.candidates()
        await make_service(selections, catalog, store).recommend(1)
        return before, await store.candidates()

    before, after = asyncio.run(scenario())
    assert before == after
