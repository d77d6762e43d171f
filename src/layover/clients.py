"""Lazy-initialized backends, reused across warm Lambda invocations."""

from functools import lru_cache

from layover.config import get_config
from layover.services.places import PhotonPlaceLookup, PlaceLookup
from layover.store import InMemoryItineraryStore, ItineraryStore
from layover.sync.search import PlaceSearch


@lru_cache(maxsize=1)
def get_itinerary_store() -> ItineraryStore:
    config = get_config()
    if config.store_backend == "aurora":
        from layover.store.aurora import AuroraItineraryStore

        return AuroraItineraryStore(config)
    return InMemoryItineraryStore()


@lru_cache(maxsize=1)
def get_place_lookup() -> PlaceLookup:
    config = get_config()
    return PhotonPlaceLookup(
        base_url=config.photon_url,
        limit=config.place_search_limit,
        timeout=config.place_search_timeout_s,
    )


def new_place_search() -> PlaceSearch:
    """A fresh search session for one event form, sharing the process-wide lookup."""
    return PlaceSearch(get_place_lookup(), debounce_seconds=get_config().place_search_debounce_seconds)
