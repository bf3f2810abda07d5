"""Shared fixtures: an on-disk SQLite database per test and in-memory engine collaborators."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from affinity.engine.memory import InMemoryInterestCatalog, InMemoryInterestEditor, InMemorySelectionSource
from affinity.engine.store import InMemoryVectorStore
from affinity.models.base import Base
from affinity.models.interest import Interest
from affinity.models.person import Person
from affinity.models.person_interest import PersonInterest  # noqa: F401
from affinity.models.person_interest_vector import PersonInterestVector  # noqa: F401


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "affinity.db"


@pytest.fixture
def async_engine(db_path: Path):
    """Async engine over a fresh SQLite file.

    NullPool opens a connection per session, so the engine can be used from
    any event loop (asyncio.run in tests, the TestClient portal for the API).
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)

    async def _create_all():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_all())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def session_factory(async_engine):
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def sync_session_factory(db_path: Path, session_factory):
    """Sync sessions on the same database file (for Celery task tests)."""
    engine = create_engine(f"sqlite:///{db_path}", poolclass=NullPool)
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()


async def add_person(session: AsyncSession, name: str, deleted: bool = False) -> Person:
    person = Person(
        display_id=name.lower(),
        first_name=name,
        last_name="Tester",
        deleted=deleted,
    )
    session.add(person)
    await session.flush()
    return person


async def add_interest(session: AsyncSession, name: str, category: str, position: int) -> Interest:
    interest = Interest(name=name, category=category, catalog_position=position)
    session.add(interest)
    await session.flush()
    return interest


@pytest.fixture
def catalog() -> InMemoryInterestCatalog:
    catalog = InMemoryInterestCatalog()
    catalog.add("Photography", "outdoor_hobbies")
    catalog.add("Reading", "observation_and_other")
    catalog.add("Cooking", "general_hobbies")
    catalog.add("Hiking", "outdoor_hobbies")
    return catalog


@pytest.fixture
def selections() -> InMemorySelectionSource:
    return InMemorySelectionSource()


@pytest.fixture
def store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def editor(catalog, selections, store) -> InMemoryInterestEditor:
    return InMemoryInterestEditor(catalog, selections, store)
