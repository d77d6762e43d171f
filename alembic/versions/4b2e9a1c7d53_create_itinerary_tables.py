"""create_itinerary_tables

Revision ID: 4b2e9a1c7d53
Revises: 
Create Date: 2026-10-19 09:12:44.118302

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4b2e9a1c7d53'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE TABLE profiles (
            principal VARCHAR(255) PRIMARY KEY,
            name TEXT NOT NULL
        )
    """)

    # Instants are BIGINT nanoseconds since the Unix epoch (UTC)
    op.execute("""
        CREATE TABLE trips (
            id BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
            owner VARCHAR(255) NOT NULL,
            name TEXT NOT NULL,
            destination TEXT,
            start_date BIGINT,
            end_date BIGINT,
            created_at BIGINT NOT NULL,
            share_token VARCHAR(64) NOT NULL UNIQUE,
            CONSTRAINT chk_trips_name CHECK (length(trim(name)) > 0),
            CONSTRAINT chk_trips_date_range
                CHECK (start_date IS NULL OR (end_date IS NOT NULL AND end_date >= start_date))
        )
    """)
    op.execute("CREATE INDEX idx_trips_owner ON trips (owner)")

    op.execute("""
        CREATE TABLE events (
            id BIGINT GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
            trip_id BIGINT NOT NULL REFERENCES trips (id) ON DELETE CASCADE,
            event_type VARCHAR(20) NOT NULL,
            title TEXT NOT NULL,
            date_time BIGINT NOT NULL,
            location_name TEXT NOT NULL,
            location_address TEXT,
            confirmation_code TEXT,
            notes TEXT,
            created_at BIGINT NOT NULL,
            CONSTRAINT chk_events_event_type CHECK (event_type IN ('Flight', 'Hotel', 'Activity')),
            CONSTRAINT chk_events_title CHECK (length(trim(title)) > 0),
            CONSTRAINT chk_events_location_name CHECK (length(trim(location_name)) > 0)
        )
    """)
    op.execute("CREATE INDEX idx_events_trip_id ON events (trip_id)")


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP INDEX IF EXISTS idx_events_trip_id")
    op.execute("DROP TABLE IF EXISTS events")
    op.execute("DROP INDEX IF EXISTS idx_trips_owner")
    op.execute("DROP TABLE IF EXISTS trips")
    op.execute("DROP TABLE IF EXISTS profiles")
