"""Itinerary store: the authoritative owner of trips, events and profiles."""

from layover.store.interface import ItineraryStore
from layover.store.memory import InMemoryItineraryStore

__all__ = ["InMemoryItineraryStore", "ItineraryStore"]
