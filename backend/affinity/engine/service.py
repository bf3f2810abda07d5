"""Recommendation service: "find people similar to me" over stored interest vectors."""

import asyncio
import logging
from typing import Awaitable, Callable, Collection, Protocol, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from affinity.config import get_settings
from affinity.engine.encoder import encode
from affinity.engine.errors import InvalidLevel, StoreError, StoreUnavailable, UnknownInterest
from affinity.engine.ranker import rank
from affinity.engine.store import VectorStore
from affinity.engine.types import (
    CatalogSnapshot,
    Failure,
    FailureKind,
    NoInterests,
    RecommendationOutcome,
    Recommendations,
    Selection,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SelectionSource(Protocol):
    async def get_person_interest_selections(self, person_id: int) -> list[Selection]: ...


class CatalogSource(Protocol):
    async def snapshot(self) -> CatalogSnapshot: ...


class RecommendationService:
    """Read-only orchestration of encode → fetch candidates → rank.

    Never recomputes stored vectors. Every outcome is typed: Recommendations,
    NoInterests, or Failure carrying a FailureKind.
    """

    def __init__(
        self,
        selections: SelectionSource,
        catalog: CatalogSource,
        store: VectorStore,
        *,
        default_limit: int | None = None,
        max_limit: int | None = None,
        timeout: float | None = None,
        retry_attempts: int | None = None,
        retry_backoff: float | None = None,
    ):
        settings = get_settings()
        self.selections = selections
        self.catalog = catalog
        self.store = store
        self.default_limit = default_limit if default_limit is not None else settings.recommendation_default_limit
        self.max_limit = max_limit if max_limit is not None else settings.recommendation_max_limit
        self.timeout = timeout if timeout is not None else settings.recommendation_timeout_seconds
        self.retry_attempts = retry_attempts if retry_attempts is not None else settings.store_retry_attempts
        self.retry_backoff = retry_backoff if retry_backoff is not None else settings.store_retry_backoff_seconds

    def resolve_limit(self, limit: int | None) -> int:
        if limit is None:
            return self.default_limit
        if limit < 1:
            raise ValueError(f"limit must be at least 1, got {limit}")
        return min(limit, self.max_limit)

    async def recommend(
        self,
        person_id: int,
        limit: int | None = None,
        exclude_ids: Collection[int] = (),
        timeout: float | None = None,
    ) -> RecommendationOutcome:
        """Return people whose interests are most similar to person_id's.

        The whole request (including store retries) runs under one deadline;
        on expiry a TIMEOUT failure is returned instead of a partial ranking.
        """
        limit = self.resolve_limit(limit)
        deadline = self.timeout if timeout is None else timeout

        try:
            return await asyncio.wait_for(self._recommend(person_id, limit, exclude_ids), timeout=deadline)
        except asyncio.TimeoutError:
            logger.warning("Recommendations for person %s timed out after %.2fs", person_id, deadline)
            return Failure(FailureKind.TIMEOUT, f"Exceeded deadline of {deadline}s")
        except StoreUnavailable as e:
            logger.warning("Vector store unavailable for person %s: %s", person_id, e)
            return Failure(FailureKind.STORE_UNAVAILABLE, str(e))
        except StoreError as e:
            # Non-transient; surfaced after a single attempt
            logger.error("Vector store error for person %s: %s", person_id, e)
            return Failure(FailureKind.STORE_UNAVAILABLE, str(e))
        except InvalidLevel as e:
            logger.error("Invalid interest level for person %s: %s", person_id, e)
            return Failure(FailureKind.INVALID_LEVEL, str(e))
        except UnknownInterest as e:
            logger.error("Catalog lookup failed for person %s: %s", person_id, e)
            return Failure(FailureKind.UNKNOWN_INTEREST, str(e))

    async def _recommend(
        self,
        person_id: int,
        limit: int,
        exclude_ids: Collection[int],
    ) -> RecommendationOutcome:
        selections = await self._with_retry(self.selections.get_person_interest_selections, person_id)
        if not selections:
            return NoInterests(person_id=person_id)

        catalog = await self._with_retry(self.catalog.snapshot)
        query = encode(selections, catalog)
        if query is None:
            # Only zero-level selections
            return NoInterests(person_id=person_id)

        candidates = await self._with_retry(self.store.candidates)
        results = rank(query, candidates, exclude_ids=exclude_ids, limit=limit, query_person_id=person_id)

        logger.debug(
            "Ranked %d candidates for person %s, returning %d",
            len(candidates), person_id, len(results),
        )
        return Recommendations(results=results)

    async def _with_retry(self, fn: Callable[..., Awaitable[T]], *args) -> T:
        async for attempt in AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self.retry_attempts + 1),
            wait=wait_exponential(multiplier=self.retry_backoff, max=2.0),
            retry=retry_if_exception_type(StoreUnavailable),
            before_sleep=before_sleep_log(logger, logging.WARNING),
        ):
            with attempt:
                result = await fn(*args)
        return result
