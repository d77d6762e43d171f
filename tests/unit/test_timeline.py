"""Unit tests for day-bucket grouping."""

from datetime import date, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import ALICE, D1, D2
from layover.models import Event, EventType, Location
from layover.timeline import group_events_by_day

HOUR = 3_600_000_000_000


def _event(event_id: int, date_time: int, title: str = "Event") -> Event:
    return Event(
        id=event_id,
        trip_id=1,
        event_type=EventType.ACTIVITY,
        title=title,
        date_time=date_time,
        location=Location(name="Somewhere"),
        created_at=0,
    )


def test_empty_input_gives_no_buckets():
    assert group_events_by_day([], timezone.utc) == []


def test_groups_by_day_in_ascending_order():
    flight = _event(1, D1, "Flight")
    hotel = _event(2, D2, "Hotel")
    dinner = _event(3, D1 + 2 * HOUR, "Dinner")

    buckets = group_events_by_day([hotel, flight, dinner], timezone.utc)

    assert [b.day for b in buckets] == [date(2026, 3, 15), date(2026, 3, 16)]
    assert [e.title for e in buckets[0].events] == ["Flight", "Dinner"]
    assert [e.title for e in buckets[1].events] == ["Hotel"]


def test_within_day_order_is_input_order_not_time_order():
    late = _event(1, D1 + 3 * HOUR, "Late")
    early = _event(2, D1, "Early")

    buckets = group_events_by_day([late, early], timezone.utc)

    assert [e.title for e in buckets[0].events] == ["Late", "Early"]


def test_every_event_lands_in_exactly_one_bucket():
    events = [_event(i, D1 + i * 5 * HOUR) for i in range(12)]

    buckets = group_events_by_day(events, timezone.utc)

    assert sorted(e.id for b in buckets for e in b.events) == list(range(12))
    assert all(b.events for b in buckets)


def test_bucketing_uses_local_date():
    # 17:30Z on the 15th is already the 16th in Tokyo.
    buckets = group_events_by_day([_event(1, D1), _event(2, D2)], ZoneInfo("Asia/Tokyo"))

    assert len(buckets) == 1
    assert buckets[0].day == date(2026, 3, 16)


def test_grouping_is_deterministic():
    events = [_event(1, D2), _event(2, D1), _event(3, D1)]
    assert group_events_by_day(events, timezone.utc) == group_events_by_day(events, timezone.utc)


def test_bucket_header():
    buckets = group_events_by_day([_event(1, D1)], timezone.utc)
    assert buckets[0].header == "Sunday, March 15"


@pytest.mark.asyncio
async def test_summer_trip_groups_stored_events_by_day(store, location):
    trip_id = await store.create_trip(ALICE, "Summer", "Miami", D1, D2)
    await store.create_event(ALICE, trip_id, EventType.FLIGHT, "Flight", D1, location)
    await store.create_event(ALICE, trip_id, EventType.HOTEL, "Hotel check-in", D1 + 2 * HOUR, location)
    await store.create_event(ALICE, trip_id, EventType.ACTIVITY, "Beach", D2, location)

    buckets = group_events_by_day(await store.get_events(ALICE, trip_id), timezone.utc)

    assert [b.day for b in buckets] == [date(2026, 3, 15), date(2026, 3, 16)]
    assert [e.title for e in buckets[0].events] == ["Flight", "Hotel check-in"]
    assert [e.title for e in buckets[1].events] == ["Beach"]
