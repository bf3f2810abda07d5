"""Tests for the interest vector rebuild sweep."""

from decimal import Decimal

import pytest

from affinity.engine.types import InterestVector
from affinity.models.interest import Interest
from affinity.models.person import Person
from affinity.models.person_interest import PersonInterest
from affinity.models.person_interest_vector import PersonInterestVector
from affinity.tasks import vector_tasks


@pytest.fixture
def seeded(sync_session_factory, monkeypatch):
    monkeypatch.setattr(vector_tasks, "SyncSessionLocal", sync_session_factory)

    with sync_session_factory() as session:
        photography = Interest(name="Photography", category="outdoor_hobbies", catalog_position=0)
        reading = Interest(name="Reading", category="observation_and_other", catalog_position=1)
        people = [
            Person(display_id=f"p{i}", first_name=f"P{i}", last_name="Tester")
            for i in range(5)
        ]
        session.add_all([photography, reading, *people])
        session.flush()

        fresh, missing, stale, orphaned, empty = people
        for person, interest, level in (
            (fresh, photography, "0.80"),
            (missing, reading, "0.40"),
            (stale, photography, "0.30"),
            (stale, reading, "0.90"),
        ):
            session.add(PersonInterest(person_id=person.id, interest_id=interest.id, level=Decimal(level)))

        # Up to date
        session.add(PersonInterestVector(person_id=fresh.id, components={"0": 0.8}, dimension=2))
        # Out of date: selections changed without a recompute
        session.add(PersonInterestVector(person_id=stale.id, components={"0": 0.3}, dimension=2))
        # Vector left behind for someone with no selections
        session.add(PersonInterestVector(person_id=orphaned.id, components={"1": 0.5}, dimension=2))
        session.commit()

        return {p.display_id: p.id for p in people}


def stored_vectors(sync_session_factory) -> dict[int, InterestVector]:
    with sync_session_factory() as session:
        return {
            row.person_id: InterestVector.from_json(row.components, row.dimension)
            for row in session.query(PersonInterestVector).all()
        }


def test_rebuild_repairs_missing_stale_and_orphaned_vectors(seeded, sync_session_factory):
    result = vector_tasks.rebuild_interest_vectors(batch_size=2)

    assert result == {"scanned": 5, "updated": 3, "failed": 0}

    vectors = stored_vectors(sync_session_factory)
    assert set(vectors) == {seeded["p0"], seeded["p1"], seeded["p2"]}
    assert vectors[seeded["p1"]] == InterestVector(dimension=2, components={1: 0.4})
    assert vectors[seeded["p2"]] == InterestVector(dimension=2, components={0: 0.3, 1: 0.9})


def test_rebuild_is_idempotent(seeded):
    vector_tasks.rebuild_interest_vectors(batch_size=10)
    assert vector_tasks.rebuild_interest_vectors(batch_size=10)["updated"] == 0
