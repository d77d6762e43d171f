"""Integration tests against a local PostgreSQL with the itinerary migration applied.

Run ``python scripts/migrate_local.py`` first; tests are skipped when the
database is unreachable.
"""

import pytest

from conftest import ALICE, BOB, D1, D2
from layover.errors import NotFoundError, ValidationError
from layover.models import EventType, Location

pytestmark = pytest.mark.integration


LOCATION = Location(name="Miami International Airport", address="2100 NW 42nd Ave, Miami, FL")


@pytest.mark.asyncio
async def test_trip_and_event_lifecycle(aurora_store):
    trip_id = await aurora_store.create_trip(ALICE, "Summer", "Miami", D1, D2)
    first = await aurora_store.create_event(ALICE, trip_id, EventType.FLIGHT, "LAX → MIA", D1, LOCATION, "UA457")
    second = await aurora_store.create_event(ALICE, trip_id, EventType.HOTEL, "Oceanview", D2, LOCATION)

    result = await aurora_store.get_trip_by_id(ALICE, trip_id)
    assert result.trip.start_date == D1
    assert [e.id for e in result.events] == [first, second]
    assert result.events[0].confirmation_code == "UA457"

    await aurora_store.update_event(ALICE, first, EventType.FLIGHT, "LAX → MIA (delayed)", D1, LOCATION)
    events = await aurora_store.get_events(ALICE, trip_id)
    assert events[0].title == "LAX → MIA (delayed)"


@pytest.mark.asyncio
async def test_update_keeps_identity_fields(aurora_store):
    trip_id = await aurora_store.create_trip(ALICE, "Summer")
    before = (await aurora_store.get_trip_by_id(ALICE, trip_id)).trip

    await aurora_store.update_trip(ALICE, trip_id, "Renamed", "Miami")

    after = (await aurora_store.get_trip_by_id(ALICE, trip_id)).trip
    assert after.name == "Renamed"
    assert (after.created_at, after.share_token) == (before.created_at, before.share_token)


@pytest.mark.asyncio
async def test_delete_cascades(aurora_store):
    trip_id = await aurora_store.create_trip(ALICE, "Summer")
    event_id = await aurora_store.create_event(ALICE, trip_id, EventType.ACTIVITY, "Beach", D1, LOCATION)

    await aurora_store.delete_trip(ALICE, trip_id)

    assert await aurora_store.get_trip_by_id(ALICE, trip_id) is None
    assert await aurora_store.get_events(ALICE, trip_id) == []
    with pytest.raises(NotFoundError):
        await aurora_store.delete_event(ALICE, event_id)


@pytest.mark.asyncio
async def test_ownership_is_enforced(aurora_store):
    trip_id = await aurora_store.create_trip(ALICE, "Summer")
    event_id = await aurora_store.create_event(ALICE, trip_id, EventType.ACTIVITY, "Beach", D1, LOCATION)

    assert await aurora_store.get_trip_by_id(BOB, trip_id) is None
    assert await aurora_store.get_events(BOB, trip_id) == []
    with pytest.raises(NotFoundError):
        await aurora_store.update_trip(BOB, trip_id, "Mine")
    with pytest.raises(NotFoundError):
        await aurora_store.create_event(BOB, trip_id, EventType.ACTIVITY, "Sneaky", D1, LOCATION)
    with pytest.raises(NotFoundError):
        await aurora_store.delete_event(BOB, event_id)
    assert (await aurora_store.get_trip_by_id(ALICE, trip_id)).trip.name == "Summer"


@pytest.mark.asyncio
async def test_shared_trip_by_token(aurora_store):
    trip_id = await aurora_store.create_trip(ALICE, "Summer")
    owner_view = await aurora_store.get_trip_by_id(ALICE, trip_id)

    assert await aurora_store.get_shared_trip(owner_view.trip.share_token) == owner_view
    assert await aurora_store.get_shared_trip("no-such-token") is None


@pytest.mark.asyncio
async def test_validation_leaves_database_untouched(aurora_store):
    with pytest.raises(ValidationError):
        await aurora_store.create_trip(ALICE, "")
    assert await aurora_store.get_trips(ALICE) == []


@pytest.mark.asyncio
async def test_profile_upsert(aurora_store):
    await aurora_store.set_profile(ALICE, "Alice")
    await aurora_store.set_profile(ALICE, "Alice B.")
    assert (await aurora_store.get_profile(ALICE)).name == "Alice B."
