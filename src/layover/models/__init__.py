"""
Pydantic models for Layover.
"""

from layover.models.itinerary import Event, EventType, Location, Profile, Trip, TripWithEvents
from layover.models.place import PlaceCandidate
from layover.models.requests import EventRequest, ProfileRequest, TripRequest

__all__ = [
    "Event",
    "EventRequest",
    "EventType",
    "Location",
    "PlaceCandidate",
    "Profile",
    "ProfileRequest",
    "Trip",
    "TripRequest",
    "TripWithEvents",
]
