"""Shared test fixtures for Layover."""

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file for test configuration
load_dotenv()

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from layover.models import Location  # noqa: E402
from layover.store import InMemoryItineraryStore  # noqa: E402

ALICE = "principal-alice"
BOB = "principal-bob"

# 2026-03-15T17:30:00Z and 2026-03-16T09:00:00Z, in nanoseconds
D1 = 1_773_595_800_000_000_000
D2 = 1_773_651_600_000_000_000


class FakeClock:
    """Deterministic nanosecond clock: each call advances one second."""

    def __init__(self, start: int = 1_770_000_000_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1_000_000_000
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryItineraryStore(clock=clock)


@pytest.fixture
def location():
    return Location(name="Miami International Airport", address="2100 NW 42nd Ave, Miami, FL")


# PostgreSQL fixtures
@pytest.fixture
def pg_connection():
    """Provide a PostgreSQL connection for integration tests."""
    import psycopg
    from layover.config import get_config

    config = get_config()
    try:
        conn = psycopg.connect(
            host=config.aurora_host,
            port=config.aurora_port,
            dbname=config.aurora_database,
            user=config.aurora_user,
            password=config.aurora_password,
            connect_timeout=3,
        )
    except psycopg.OperationalError as e:
        pytest.skip(f"PostgreSQL not available: {e}")
    yield conn

    # Rollback any uncommitted changes
    conn.rollback()
    conn.close()


@pytest.fixture
def aurora_store(pg_connection):
    """AuroraItineraryStore against the local database; test rows are removed afterwards."""
    from layover.config import get_config
    from layover.store.aurora import AuroraItineraryStore

    store = AuroraItineraryStore(get_config())
    store.connect()
    yield store

    store.disconnect()
    with pg_connection.cursor() as cur:
        cur.execute("DELETE FROM trips WHERE owner IN (%s, %s)", (ALICE, BOB))
        cur.execute("DELETE FROM profiles WHERE principal IN (%s, %s)", (ALICE, BOB))
    pg_connection.commit()
