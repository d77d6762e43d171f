"""Session-scoped itinerary client with cache invalidation.

Reads go through the QueryCache. Each mutation waits for the store to
acknowledge, then invalidates every cache entry the write could have
changed, and only then returns to the caller:

    create/update/delete trip   -> trips list (+ the trip itself on update)
    create/update/delete event  -> the trip's events list and the trip
    set profile                 -> profile

A failed mutation invalidates nothing. Shared-trip entries are keyed by
token, not principal, and owner writes never invalidate them.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import tzinfo
from typing import TypeVar

from layover.access import IdentityState, resolve_identity_state
from layover.config import get_config
from layover.errors import AuthenticationError, ErrorCode
from layover.models import Event, EventType, Location, Profile, Trip, TripWithEvents
from layover.store import ItineraryStore
from layover.sync.cache import QueryCache, QueryKey, consume_exception
from layover.timeline import DayBucket, group_events_by_day

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _EntityLock:
    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.users = 0


class ItineraryClient:
    def __init__(self, store: ItineraryStore, cache: QueryCache | None = None) -> None:
        self._store = store
        self._cache = cache if cache is not None else QueryCache()
        self._principal: str | None = None
        self._initializing = True
        self._entity_locks: dict[tuple[str, str], _EntityLock] = {}

    @property
    def cache(self) -> QueryCache:
        return self._cache

    @property
    def principal(self) -> str | None:
        return self._principal

    # Session lifecycle

    def sign_in(self, principal: str) -> None:
        if principal != self._principal:
            self._cache.clear()
            self._entity_locks.clear()
            logger.info("Session started for %s", principal)
        self._principal = principal
        self._initializing = False

    def sign_out(self) -> None:
        self._cache.clear()
        self._entity_locks.clear()
        self._principal = None
        self._initializing = False
        logger.info("Session ended")

    async def identity_state(self) -> IdentityState:
        profile = None
        if not self._initializing and self._principal is not None:
            profile = await self.profile()
        return resolve_identity_state(self._initializing, self._principal, profile)

    def _require_principal(self) -> str:
        if self._principal is None:
            raise AuthenticationError("Not signed in", code=ErrorCode.NOT_AUTHENTICATED)
        return self._principal

    # Queries

    async def trips(self) -> list[Trip]:
        principal = self._require_principal()
        return await self._cache.fetch(QueryKey.trips(principal), lambda: self._store.get_trips(principal))

    async def trip(self, trip_id: int) -> TripWithEvents | None:
        principal = self._require_principal()
        return await self._cache.fetch(
            QueryKey.trip(trip_id, principal), lambda: self._store.get_trip_by_id(principal, trip_id)
        )

    async def events(self, trip_id: int) -> list[Event]:
        principal = self._require_principal()
        return await self._cache.fetch(
            QueryKey.events(trip_id, principal), lambda: self._store.get_events(principal, trip_id)
        )

    async def profile(self) -> Profile | None:
        principal = self._require_principal()
        return await self._cache.fetch(QueryKey.profile(principal), lambda: self._store.get_profile(principal))

    async def shared_trip(self, share_token: str) -> TripWithEvents | None:
        """Point-in-time read of a shared trip; needs no sign-in."""
        return await self._cache.fetch(
            QueryKey.shared_trip(share_token), lambda: self._store.get_shared_trip(share_token)
        )

    async def timeline(self, trip_id: int, tz: tzinfo | None = None) -> list[DayBucket]:
        """The trip's events grouped by local day, in ``tz`` or the configured zone."""
        events = await self.events(trip_id)
        return group_events_by_day(events, tz if tz is not None else get_config().zone)

    # Mutations

    @contextlib.asynccontextmanager
    async def _lock(self, entity: tuple[str, str] | None) -> AsyncIterator[None]:
        """Hold the entity's lock. The lock is dropped once no writer holds or awaits it."""
        if entity is None:
            yield
            return
        entry = self._entity_locks.get(entity)
        if entry is None:
            entry = self._entity_locks[entity] = _EntityLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0 and self._entity_locks.get(entity) is entry:
                del self._entity_locks[entity]

    async def _mutate(
        self,
        entity: tuple[str, str] | None,
        operation: Callable[[], Awaitable[T]],
        invalidates: list[QueryKey],
    ) -> T:
        """Run ``operation`` to completion, then invalidate ``invalidates``.

        Writes to the same entity from this client run one at a time. Once
        started, a write is shielded from the caller's cancellation so the
        store call and its invalidation always settle together.
        """

        async def settle() -> T:
            async with self._lock(entity):
                result = await operation()
            for key in invalidates:
                self._cache.invalidate(key)
            return result

        task = asyncio.ensure_future(settle())
        task.add_done_callback(consume_exception)
        return await asyncio.shield(task)

    async def create_trip(
        self,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> int:
        principal = self._require_principal()
        return await self._mutate(
            None,
            lambda: self._store.create_trip(principal, name, destination, start_date, end_date),
            [QueryKey.trips(principal)],
        )

    async def update_trip(
        self,
        trip_id: int,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> None:
        principal = self._require_principal()
        await self._mutate(
            ("trip", str(trip_id)),
            lambda: self._store.update_trip(principal, trip_id, name, destination, start_date, end_date),
            [QueryKey.trips(principal), QueryKey.trip(trip_id, principal)],
        )

    async def delete_trip(self, trip_id: int) -> None:
        principal = self._require_principal()
        await self._mutate(
            ("trip", str(trip_id)),
            lambda: self._store.delete_trip(principal, trip_id),
            [QueryKey.trips(principal)],
        )

    async def create_event(
        self,
        trip_id: int,
        event_type: EventType,
        title: str,
        date_time: int,
        location: Location,
        confirmation_code: str | None = None,
        notes: str | None = None,
    ) -> int:
        principal = self._require_principal()
        return await self._mutate(
            ("trip", str(trip_id)),
            lambda: self._store.create_event(
                principal, trip_id, event_type, title, date_time, location, confirmation_code, notes
            ),
            [QueryKey.events(trip_id, principal), QueryKey.trip(trip_id, principal)],
        )

    async def update_event(
        self,
        event_id: int,
        trip_id: int,
        event_type: EventType,
        title: str,
        date_time: int,
        location: Location,
        confirmation_code: str | None = None,
        notes: str | None = None,
    ) -> None:
        principal = self._require_principal()
        await self._mutate(
            ("event", str(event_id)),
            lambda: self._store.update_event(
                principal, event_id, event_type, title, date_time, location, confirmation_code, notes
            ),
            [QueryKey.events(trip_id, principal), QueryKey.trip(trip_id, principal)],
        )

    async def delete_event(self, event_id: int, trip_id: int) -> None:
        principal = self._require_principal()
        await self._mutate(
            ("event", str(event_id)),
            lambda: self._store.delete_event(principal, event_id),
            [QueryKey.events(trip_id, principal), QueryKey.trip(trip_id, principal)],
        )

    async def set_profile(self, name: str) -> None:
        principal = self._require_principal()
        await self._mutate(
            ("profile", principal),
            lambda: self._store.set_profile(principal, name),
            [QueryKey.profile(principal)],
        )
