"""Process-local itinerary store.

Used for local development and tests. All state lives in dicts guarded by a
single lock, so every write (including the trip -> events cascade) is atomic
with respect to concurrent callers and the last acknowledged write wins.
"""

import itertools
import logging
import threading
from collections.abc import Callable

from layover.errors import NotFoundError
from layover.models import Event, EventType, Location, Profile, Trip, TripWithEvents
from layover.store.interface import ItineraryStore
from layover.store.validation import new_share_token, validate_event, validate_profile, validate_trip
from layover.timeutil import now_nanos

logger = logging.getLogger(__name__)


class InMemoryItineraryStore(ItineraryStore):
    def __init__(
        self,
        clock: Callable[[], int] = now_nanos,
        token_factory: Callable[[], str] = new_share_token,
    ) -> None:
        self._clock = clock
        self._token_factory = token_factory
        self._lock = threading.Lock()
        self._trip_ids = itertools.count(1)
        self._event_ids = itertools.count(1)
        self._trips: dict[int, Trip] = {}
        self._owners: dict[int, str] = {}
        self._events: dict[int, Event] = {}
        self._share_index: dict[str, int] = {}
        self._profiles: dict[str, Profile] = {}

    def _owned_trip(self, principal: str, trip_id: int) -> Trip | None:
        if self._owners.get(trip_id) != principal:
            return None
        return self._trips[trip_id]

    def _require_owned_trip(self, principal: str, trip_id: int) -> Trip:
        trip = self._owned_trip(principal, trip_id)
        if trip is None:
            raise NotFoundError(f"Trip {trip_id} not found")
        return trip

    def _require_owned_event(self, principal: str, event_id: int) -> Event:
        event = self._events.get(event_id)
        if event is None or self._owned_trip(principal, event.trip_id) is None:
            raise NotFoundError(f"Event {event_id} not found")
        return event

    def _unique_share_token(self) -> str:
        token = self._token_factory()
        while token in self._share_index:
            token = self._token_factory()
        return token

    def _events_for(self, trip_id: int) -> list[Event]:
        return [e.model_copy(deep=True) for e in self._events.values() if e.trip_id == trip_id]

    async def create_trip(
        self,
        principal: str,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> int:
        validate_trip(name, start_date, end_date)
        with self._lock:
            trip_id = next(self._trip_ids)
            token = self._unique_share_token()
            self._trips[trip_id] = Trip(
                id=trip_id,
                name=name,
                destination=destination,
                start_date=start_date,
                end_date=end_date,
                created_at=self._clock(),
                share_token=token,
            )
            self._owners[trip_id] = principal
            self._share_index[token] = trip_id
        logger.info("Created trip %d for %s", trip_id, principal)
        return trip_id

    async def update_trip(
        self,
        principal: str,
        trip_id: int,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> None:
        validate_trip(name, start_date, end_date)
        with self._lock:
            trip = self._require_owned_trip(principal, trip_id)
            self._trips[trip_id] = trip.model_copy(
                update={"name": name, "destination": destination, "start_date": start_date, "end_date": end_date}
            )

    async def delete_trip(self, principal: str, trip_id: int) -> None:
        with self._lock:
            trip = self._require_owned_trip(principal, trip_id)
            # Events first, then the trip; both happen under the lock.
            doomed = [event_id for event_id, e in self._events.items() if e.trip_id == trip_id]
            for event_id in doomed:
                del self._events[event_id]
            del self._trips[trip_id]
            del self._owners[trip_id]
            del self._share_index[trip.share_token]
        logger.info("Deleted trip %d (%d events) for %s", trip_id, len(doomed), principal)

    async def get_trips(self, principal: str) -> list[Trip]:
        with self._lock:
            return [t.model_copy() for trip_id, t in self._trips.items() if self._owners[trip_id] == principal]

    async def get_trip_by_id(self, principal: str, trip_id: int) -> TripWithEvents | None:
        with self._lock:
            trip = self._owned_trip(principal, trip_id)
            if trip is None:
                return None
            return TripWithEvents(trip=trip.model_copy(), events=self._events_for(trip_id))

    async def create_event(
        self,
        principal: str,
        trip_id: int,
        event_type: EventType,
        title: str,
        date_time: int,
        location: Location,
        confirmation_code: str | None = None,
        notes: str | None = None,
    ) -> int:
        validate_event(title, date_time, location)
        with self._lock:
            self._require_owned_trip(principal, trip_id)
            event_id = next(self._event_ids)
            self._events[event_id] = Event(
                id=event_id,
                trip_id=trip_id,
                event_type=event_type,
                title=title,
                date_time=date_time,
                location=location.model_copy(),
                confirmation_code=confirmation_code,
                notes=notes,
                created_at=self._clock(),
            )
        return event_id

    async def update_event(
        self,
        principal: str,
        event_id: int,
        event_type: EventType,
        title: str,
        date_time: int,
        location: Location,
        confirmation_code: str | None = None,
        notes: str | None = None,
    ) -> None:
        validate_event(title, date_time, location)
        with self._lock:
            event = self._require_owned_event(principal, event_id)
            self._events[event_id] = event.model_copy(
                update={
                    "event_type": event_type,
                    "title": title,
                    "date_time": date_time,
                    "location": location.model_copy(),
                    "confirmation_code": confirmation_code,
                    "notes": notes,
                }
            )

    async def delete_event(self, principal: str, event_id: int) -> None:
        with self._lock:
            self._require_owned_event(principal, event_id)
            del self._events[event_id]

    async def get_events(self, principal: str, trip_id: int) -> list[Event]:
        with self._lock:
            if self._owned_trip(principal, trip_id) is None:
                return []
            return self._events_for(trip_id)

    async def get_shared_trip(self, share_token: str) -> TripWithEvents | None:
        with self._lock:
            trip_id = self._share_index.get(share_token)
            if trip_id is None:
                return None
            return TripWithEvents(trip=self._trips[trip_id].model_copy(), events=self._events_for(trip_id))

    async def set_profile(self, principal: str, name: str) -> None:
        validate_profile(name)
        with self._lock:
            self._profiles[principal] = Profile(name=name)

    async def get_profile(self, principal: str) -> Profile | None:
        with self._lock:
            profile = self._profiles.get(principal)
            return profile.model_copy() if profile is not None else None
