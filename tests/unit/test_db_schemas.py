from sqlalchemy import CheckConstraint
from sqlalchemy.orm import configure_mappers

from layover.db import Base, Event, Profile, Trip


def test_tables_registered_on_metadata():
    assert set(Base.metadata.tables) == {"trips", "events", "profiles"}


def test_trip_share_token_is_unique():
    assert Trip.__table__.c.share_token.unique
    assert not Trip.__table__.c.share_token.nullable


def test_event_foreign_key_cascades():
    (fk,) = Event.__table__.c.trip_id.foreign_keys
    assert fk.column.table.name == "trips"
    assert fk.ondelete == "CASCADE"


def test_trip_date_range_check():
    checks = {c.name: str(c.sqltext) for c in Trip.__table__.constraints if isinstance(c, CheckConstraint)}
    assert "end_date >= start_date" in checks["chk_trips_date_range"]


def test_profile_keyed_by_principal():
    assert [c.name for c in Profile.__table__.primary_key] == ["principal"]


def test_trip_events_relationship():
    configure_mappers()
    assert Trip.events.property.mapper.class_ is Event
