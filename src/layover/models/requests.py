"""Request bodies accepted by the itinerary API."""

from layover.models.itinerary import EventType, Instant, Location, WireModel


class TripRequest(WireModel):
    name: str
    destination: str | None = None
    start_date: Instant | None = None
    end_date: Instant | None = None


class EventRequest(WireModel):
    event_type: EventType
    title: str
    date_time: Instant
    location: Location
    confirmation_code: str | None = None
    notes: str | None = None


class ProfileRequest(WireModel):
    name: str
