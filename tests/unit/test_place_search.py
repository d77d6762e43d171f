"""Unit tests for debounced, latest-wins place search."""

import asyncio
from unittest.mock import patch

import pytest

from layover.errors import ErrorCode, TransientError
from layover.models import Location, PlaceCandidate
from layover.services.places import PhotonPlaceLookup, PlaceLookup
from layover.sync import PlaceSearch


class FakeLookup(PlaceLookup):
    def __init__(self) -> None:
        self.queries: list[str] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.failures: set[str] = set()

    async def search(self, query: str) -> list[PlaceCandidate]:
        self.queries.append(query)
        if query in self.gates:
            await self.gates[query].wait()
        if query in self.failures:
            raise TransientError("lookup down", code=ErrorCode.SEARCH_FAILED)
        return [PlaceCandidate(name=f"{query} result", city="Miami")]


@pytest.fixture
def lookup():
    return FakeLookup()


@pytest.mark.asyncio
async def test_search_returns_results(lookup):
    search = PlaceSearch(lookup, debounce_seconds=0)

    search.update_query("Miami airport")
    state = await search.wait()

    assert state.query == "Miami airport"
    assert [c.name for c in state.results] == ["Miami airport result"]
    assert not state.is_searching
    assert not state.failed


@pytest.mark.asyncio
async def test_blank_query_clears_without_request(lookup):
    search = PlaceSearch(lookup, debounce_seconds=0)
    search.update_query("Miami")
    await search.wait()

    assert search.update_query("   ") is None

    assert search.state.results == []
    assert lookup.queries == ["Miami"]


@pytest.mark.asyncio
async def test_typing_within_debounce_sends_only_last_query(lookup):
    search = PlaceSearch(lookup, debounce_seconds=0.05)

    search.update_query("M")
    search.update_query("Mi")
    search.update_query("Mia")
    state = await search.wait()

    assert lookup.queries == ["Mia"]
    assert state.query == "Mia"


@pytest.mark.asyncio
async def test_superseded_response_is_discarded(lookup):
    lookup.gates["old"] = asyncio.Event()
    search = PlaceSearch(lookup, debounce_seconds=0)

    search.update_query("old")
    while "old" not in lookup.queries:
        await asyncio.sleep(0)
    assert search.state.is_searching

    search.update_query("new")
    await search.wait()
    lookup.gates["old"].set()
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert search.state.query == "new"
    assert [c.name for c in search.state.results] == ["new result"]


@pytest.mark.asyncio
async def test_lookup_failure_sets_failed(lookup):
    lookup.failures.add("nowhere")
    search = PlaceSearch(lookup, debounce_seconds=0)

    search.update_query("nowhere")
    state = await search.wait()

    assert state.failed
    assert state.results == []
    assert not state.is_searching


@pytest.mark.asyncio
async def test_select_resets_and_returns_location(lookup):
    search = PlaceSearch(lookup, debounce_seconds=0)
    search.update_query("Oceanview")
    await search.wait()

    candidate = PlaceCandidate(name="Oceanview Resort", street="Collins Ave", city="Miami", state="FL")
    location = search.select(candidate)

    assert location == Location(name="Oceanview Resort", address="Collins Ave, Miami, FL")
    assert search.state.query == ""
    assert search.state.results == []


@pytest.mark.asyncio
@patch("layover.services.places.requests.get")
async def test_malformed_lookup_response_sets_failed(mock_get):
    mock_get.return_value.json.return_value = None
    search = PlaceSearch(PhotonPlaceLookup("https://photon.example/api/"), debounce_seconds=0)

    search.update_query("miami")
    state = await search.wait()

    assert state.failed
    assert not state.is_searching
    assert state.results == []
