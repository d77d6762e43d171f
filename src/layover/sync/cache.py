"""Client-side cache of query results.

Entries are keyed by (kind, entity id, principal). An invalidated entry is
marked stale and its generation is bumped, so a fetch that was already in
flight when the invalidation happened can never repopulate the entry as
fresh. The next read after an invalidation always goes back to the store.

Failed fetches keep the last good data and record the error. Nothing is
retried automatically; the caller decides when to fetch again.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

T = TypeVar("T")


class QueryKind(str, Enum):
    TRIPS = "trips"
    TRIP = "trip"
    EVENTS = "events"
    PROFILE = "profile"
    SHARED_TRIP = "sharedTrip"


class QueryKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: QueryKind
    entity_id: str | None = None
    principal: str | None = None

    @classmethod
    def trips(cls, principal: str) -> "QueryKey":
        return cls(kind=QueryKind.TRIPS, principal=principal)

    @classmethod
    def trip(cls, trip_id: int, principal: str) -> "QueryKey":
        return cls(kind=QueryKind.TRIP, entity_id=str(trip_id), principal=principal)

    @classmethod
    def events(cls, trip_id: int, principal: str) -> "QueryKey":
        return cls(kind=QueryKind.EVENTS, entity_id=str(trip_id), principal=principal)

    @classmethod
    def profile(cls, principal: str) -> "QueryKey":
        return cls(kind=QueryKind.PROFILE, principal=principal)

    @classmethod
    def shared_trip(cls, share_token: str) -> "QueryKey":
        # Not principal-scoped: the same link reads the same trip for everyone.
        return cls(kind=QueryKind.SHARED_TRIP, entity_id=share_token)


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class QueryState(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: QueryStatus
    data: Any = None
    error: Exception | None = None
    is_stale: bool = False
    is_fetching: bool = False


class _Entry:
    __slots__ = ("data", "has_data", "error", "stale", "generation", "inflight")

    def __init__(self) -> None:
        self.data: Any = None
        self.has_data = False
        self.error: Exception | None = None
        self.stale = False
        self.generation = 0
        self.inflight: asyncio.Task | None = None

    @property
    def is_fresh(self) -> bool:
        return self.has_data and not self.stale and self.error is None


def consume_exception(task: asyncio.Task) -> None:
    """Mark a background task's exception as retrieved once every waiter has gone."""
    if not task.cancelled():
        task.exception()


class QueryCache:
    """Session-scoped key/value cache. Create one per session, ``clear()`` on sign-out."""

    def __init__(self) -> None:
        self._entries: dict[QueryKey, _Entry] = {}

    async def fetch(self, key: QueryKey, fetcher: Callable[[], Awaitable[T]]) -> T:
        """Return fresh cached data for ``key`` or run ``fetcher``.

        Concurrent reads of the same key share one fetch. Cancelling the
        awaiting task abandons the read without cancelling that shared fetch.
        """
        entry = self._entries.setdefault(key, _Entry())
        if entry.is_fresh:
            logger.debug("Cache hit for %s", key)
            return entry.data

        if entry.inflight is None:
            task = asyncio.ensure_future(self._run(entry, entry.generation, fetcher))
            task.add_done_callback(consume_exception)
            entry.inflight = task
        return await asyncio.shield(entry.inflight)

    async def _run(self, entry: _Entry, generation: int, fetcher: Callable[[], Awaitable[T]]) -> T:
        try:
            data = await fetcher()
        except Exception as e:
            if entry.generation == generation:
                entry.error = e
            raise
        else:
            if entry.generation == generation:
                entry.data = data
                entry.has_data = True
                entry.stale = False
                entry.error = None
            return data
        finally:
            if entry.inflight is asyncio.current_task():
                entry.inflight = None

    def invalidate(self, key: QueryKey) -> bool:
        """Mark ``key`` stale. Returns False when nothing was cached under it."""
        entry = self._entries.get(key)
        if entry is None:
            return False
        entry.stale = True
        entry.generation += 1
        entry.inflight = None
        logger.debug("Invalidated %s", key)
        return True

    def clear(self) -> None:
        for entry in self._entries.values():
            entry.generation += 1
            entry.inflight = None
        self._entries.clear()
        logger.info("Query cache cleared")

    def state(self, key: QueryKey) -> QueryState:
        entry = self._entries.get(key)
        if entry is None:
            return QueryState(status=QueryStatus.IDLE)
        fetching = entry.inflight is not None
        if entry.error is not None:
            status = QueryStatus.ERROR
        elif entry.has_data:
            status = QueryStatus.SUCCESS
        elif fetching:
            status = QueryStatus.LOADING
        else:
            status = QueryStatus.IDLE
        return QueryState(
            status=status,
            data=entry.data,
            error=entry.error,
            is_stale=entry.stale,
            is_fetching=fetching,
        )

    def __contains__(self, key: object) -> bool:
        return key in self._entries
