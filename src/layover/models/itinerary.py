"""Pydantic models for trips, events and profiles.

Attributes are snake_case in Python and serialize under the camelCase wire
names (``shareToken``, ``tripId``, ``dateTime`` ...) that persisted data and
existing clients use. Dump with ``model_dump(by_alias=True)``.
"""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from layover.timeutil import MAX_INSTANT, MIN_INSTANT

MAX_ID = 2**64

# Nanoseconds since the Unix epoch.
Instant = Annotated[int, Field(ge=MIN_INSTANT, le=MAX_INSTANT)]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventType(str, Enum):
    FLIGHT = "Flight"
    HOTEL = "Hotel"
    ACTIVITY = "Activity"

    @classmethod
    def from_label(cls, label: str) -> "EventType":
        """Map a form label to an event type. Unknown labels become Activity."""
        for member in cls:
            if member.value.lower() == label.strip().lower():
                return member
        return cls.ACTIVITY


class Location(WireModel):
    name: str
    address: str | None = None


class Profile(WireModel):
    name: str


class Trip(WireModel):
    id: int = Field(..., ge=0, lt=MAX_ID)
    name: str
    destination: str | None = None
    start_date: Instant | None = None
    end_date: Instant | None = None
    created_at: Instant
    share_token: str


class Event(WireModel):
    id: int = Field(..., ge=0, lt=MAX_ID)
    trip_id: int = Field(..., ge=0, lt=MAX_ID)
    event_type: EventType
    title: str
    date_time: Instant
    location: Location
    confirmation_code: str | None = None
    notes: str | None = None
    created_at: Instant


class TripWithEvents(WireModel):
    trip: Trip
    events: list[Event] = []
