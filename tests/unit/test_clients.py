import os
from unittest.mock import patch

import pytest

from layover.clients import get_itinerary_store, get_place_lookup, new_place_search
from layover.config import _reset_config
from layover.services.places import PhotonPlaceLookup
from layover.store import InMemoryItineraryStore
from layover.store.aurora import AuroraItineraryStore


@pytest.fixture(autouse=True)
def _clear_caches():
    _reset_config()
    get_itinerary_store.cache_clear()
    get_place_lookup.cache_clear()
    yield
    _reset_config()
    get_itinerary_store.cache_clear()
    get_place_lookup.cache_clear()


def test_memory_backend_by_default():
    with patch.dict(os.environ, {}, clear=True):
        store = get_itinerary_store()
        assert isinstance(store, InMemoryItineraryStore)
        assert get_itinerary_store() is store


def test_aurora_backend():
    with patch.dict(os.environ, {"STORE_BACKEND": "aurora"}, clear=True):
        assert isinstance(get_itinerary_store(), AuroraItineraryStore)


def test_place_lookup_uses_config():
    with patch.dict(os.environ, {"PHOTON_URL": "https://photon.internal/api/"}, clear=True):
        lookup = get_place_lookup()
        assert isinstance(lookup, PhotonPlaceLookup)
        assert lookup._base_url == "https://photon.internal/api/"


def test_new_place_search_is_per_form():
    with patch.dict(os.environ, {"PLACE_SEARCH_DEBOUNCE_MS": "50"}, clear=True):
        first = new_place_search()
        second = new_place_search()
        assert first is not second
        assert first._debounce == 0.05
        assert first._lookup is second._lookup
