"""Group events into chronological day buckets for the trip timeline."""

from collections.abc import Iterable
from datetime import date, tzinfo

from pydantic import BaseModel

from layover.models import Event
from layover.timeutil import format_day_header, local_date


class DayBucket(BaseModel):
    day: date
    events: list[Event]

    @property
    def header(self) -> str:
        return format_day_header(self.day)


def group_events_by_day(events: Iterable[Event], tz: tzinfo) -> list[DayBucket]:
    """Bucket events by their calendar date in ``tz``.

    Buckets come back in ascending date order. Within a bucket, events keep
    the order they were supplied in; nothing is re-sorted by time. Pure and
    deterministic: the same input always yields the same buckets.
    """
    by_day: dict[date, list[Event]] = {}
    for event in events:
        by_day.setdefault(local_date(event.date_time, tz), []).append(event)

    return [DayBucket(day=day, events=by_day[day]) for day in sorted(by_day)]
