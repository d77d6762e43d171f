"""Itinerary store contract.

Every owner operation takes the calling principal first and is scoped to
that principal's own trips. A trip owned by someone else behaves exactly
like a trip that does not exist: reads return None or an empty list and
writes raise NotFoundError. ``get_shared_trip`` is the only operation that
takes no principal, and it can only read.
"""

from abc import ABC, abstractmethod

from layover.models import Event, EventType, Location, Profile, Trip, TripWithEvents


class ItineraryStore(ABC):
    # Trips

    @abstractmethod
    async def create_trip(
        self,
        principal: str,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> int: ...

    @abstractmethod
    async def update_trip(
        self,
        principal: str,
        trip_id: int,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> None:
        """Replace the editable fields. id, created_at and share_token never change."""
        ...

    @abstractmethod
    async def delete_trip(self, principal: str, trip_id: int) -> None:
        """Delete a trip and every event that belongs to it."""
        ...

    @abstractmethod
    async def get_trips(self, principal: str) -> list[Trip]: ...

    @abstractmethod
    async def get_trip_by_id(self, principal: str, trip_id: int) -> TripWithEvents | None: ...

    # Events

    @abstractmethod
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
    ) -> int: ...

    @abstractmethod
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
    ) -> None: ...

    @abstractmethod
    async def delete_event(self, principal: str, event_id: int) -> None: ...

    @abstractmethod
    async def get_events(self, principal: str, trip_id: int) -> list[Event]: ...

    # Sharing

    @abstractmethod
    async def get_shared_trip(self, share_token: str) -> TripWithEvents | None: ...

    # Profile

    @abstractmethod
    async def set_profile(self, principal: str, name: str) -> None: ...

    @abstractmethod
    async def get_profile(self, principal: str) -> Profile | None: ...
