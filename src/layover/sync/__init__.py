"""Client-side synchronization: query cache, itinerary client, place search."""

from layover.sync.cache import QueryCache, QueryKey, QueryKind, QueryState, QueryStatus
from layover.sync.client import ItineraryClient
from layover.sync.search import PlaceSearch, PlaceSearchState

__all__ = [
    "ItineraryClient",
    "PlaceSearch",
    "PlaceSearchState",
    "QueryCache",
    "QueryKey",
    "QueryKind",
    "QueryState",
    "QueryStatus",
]
