"""Aurora PostgreSQL itinerary store: connection management and CRUD.

Ownership is checked inside each statement's WHERE clause, so a trip owned
by another principal matches zero rows, exactly like a missing one. Each
write runs in its own transaction; the trip -> events cascade is the
``ON DELETE CASCADE`` foreign key on ``events.trip_id``.
"""

import asyncio
import json
import logging
import threading
from collections.abc import Callable
from typing import Any, TypeVar

import boto3
import psycopg
from psycopg.rows import dict_row

from layover.config import Config
from layover.errors import ErrorCode, LayoverError, NotFoundError, TransientError, ValidationError
from layover.models import Event, EventType, Location, Profile, Trip, TripWithEvents
from layover.store.interface import ItineraryStore
from layover.store.validation import new_share_token, validate_event, validate_profile, validate_trip
from layover.timeutil import now_nanos

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MAX_TOKEN_ATTEMPTS = 5

_TRIP_COLUMNS = "t.id, t.name, t.destination, t.start_date, t.end_date, t.created_at, t.share_token"

_EVENT_COLUMNS = (
    "e.id, e.trip_id, e.event_type, e.title, e.date_time, e.location_name, "
    "e.location_address, e.confirmation_code, e.notes, e.created_at"
)

_INSERT_TRIP_SQL = """
    INSERT INTO trips (owner, name, destination, start_date, end_date, created_at, share_token)
    VALUES (%s, %s, %s, %s, %s, %s, %s)
    RETURNING id
"""

_UPDATE_TRIP_SQL = """
    UPDATE trips SET name = %s, destination = %s, start_date = %s, end_date = %s
    WHERE id = %s AND owner = %s
"""

_DELETE_TRIP_SQL = "DELETE FROM trips WHERE id = %s AND owner = %s"

_SELECT_TRIPS_SQL = f"SELECT {_TRIP_COLUMNS} FROM trips t WHERE t.owner = %s ORDER BY t.id"

_SELECT_TRIP_SQL = f"SELECT {_TRIP_COLUMNS} FROM trips t WHERE t.id = %s AND t.owner = %s FOR SHARE"

_SELECT_SHARED_TRIP_SQL = f"SELECT {_TRIP_COLUMNS} FROM trips t WHERE t.share_token = %s FOR SHARE"

_SELECT_EVENTS_SQL = f"SELECT {_EVENT_COLUMNS} FROM events e WHERE e.trip_id = %s ORDER BY e.id"

_SELECT_OWNED_EVENTS_SQL = f"""
    SELECT {_EVENT_COLUMNS} FROM events e
    JOIN trips t ON t.id = e.trip_id
    WHERE e.trip_id = %s AND t.owner = %s
    ORDER BY e.id
"""

_INSERT_EVENT_SQL = """
    INSERT INTO events (trip_id, event_type, title, date_time, location_name, location_address,
                        confirmation_code, notes, created_at)
    SELECT t.id, %s, %s, %s, %s, %s, %s, %s, %s FROM trips t
    WHERE t.id = %s AND t.owner = %s
    RETURNING id
"""

_UPDATE_EVENT_SQL = """
    UPDATE events e SET event_type = %s, title = %s, date_time = %s, location_name = %s,
                        location_address = %s, confirmation_code = %s, notes = %s
    FROM trips t
    WHERE e.id = %s AND e.trip_id = t.id AND t.owner = %s
"""

_DELETE_EVENT_SQL = """
    DELETE FROM events e USING trips t
    WHERE e.id = %s AND e.trip_id = t.id AND t.owner = %s
"""

_UPSERT_PROFILE_SQL = """
    INSERT INTO profiles (principal, name) VALUES (%s, %s)
    ON CONFLICT (principal) DO UPDATE SET name = EXCLUDED.name
"""

_SELECT_PROFILE_SQL = "SELECT name FROM profiles WHERE principal = %s"


def _row_to_trip(row: dict[str, Any]) -> Trip:
    return Trip(
        id=row["id"],
        name=row["name"],
        destination=row["destination"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        created_at=row["created_at"],
        share_token=row["share_token"],
    )


def _row_to_event(row: dict[str, Any]) -> Event:
    return Event(
        id=row["id"],
        trip_id=row["trip_id"],
        event_type=EventType(row["event_type"]),
        title=row["title"],
        date_time=row["date_time"],
        location=Location(name=row["location_name"], address=row["location_address"]),
        confirmation_code=row["confirmation_code"],
        notes=row["notes"],
        created_at=row["created_at"],
    )


class AuroraItineraryStore(ItineraryStore):
    """psycopg runs on a worker thread; one statement or transaction at a time per connection."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._conn: psycopg.Connection | None = None
        self._secret_cache: dict[str, str] | None = None
        self._lock = threading.Lock()

    def _get_credentials(self) -> dict[str, str]:
        if self._config.aurora_secret_arn:
            if self._secret_cache is None:
                client = boto3.client("secretsmanager", region_name=self._config.aws_region)
                secret = client.get_secret_value(SecretId=self._config.aurora_secret_arn)
                self._secret_cache = json.loads(secret["SecretString"])
            return self._secret_cache
        return {
            "host": self._config.aurora_host,
            "port": str(self._config.aurora_port),
            "dbname": self._config.aurora_database,
            "user": self._config.aurora_user,
            "password": self._config.aurora_password,
        }

    def connect(self) -> None:
        creds = self._get_credentials()
        try:
            self._conn = psycopg.connect(
                host=creds.get("host", self._config.aurora_host),
                port=int(creds.get("port", self._config.aurora_port)),
                dbname=creds.get("dbname", self._config.aurora_database),
                user=creds.get("username", creds.get("user", self._config.aurora_user)),
                password=creds.get("password", self._config.aurora_password),
                autocommit=True,
            )
        except psycopg.OperationalError as e:
            raise TransientError(f"Could not connect to Aurora: {e}") from e

    def disconnect(self) -> None:
        if self._conn and not self._conn.closed:
            self._conn.close()
        self._conn = None

    def _require_connection(self) -> psycopg.Connection:
        """Return the active connection, connecting lazily on first use."""
        if self._conn is None or self._conn.closed:
            self.connect()
        if self._conn is None:
            raise LayoverError("AuroraItineraryStore could not open a connection.")
        return self._conn

    def health_check(self) -> bool:
        try:
            with self._lock:
                conn = self._require_connection()
                with conn.cursor() as cur:
                    cur.execute("SELECT 1")
            return True
        except Exception:
            return False

    async def _run(self, work: Callable[[psycopg.Connection], T]) -> T:
        """Run ``work`` with the connection on a worker thread, mapping driver errors."""

        def locked() -> T:
            with self._lock:
                return work(self._require_connection())

        try:
            return await asyncio.to_thread(locked)
        except psycopg.OperationalError as e:
            raise TransientError(f"Aurora request failed: {e}") from e
        except psycopg.DataError as e:
            raise ValidationError(f"Value rejected by the database: {e}", code=ErrorCode.INVALID_REQUEST) from e

    async def _execute(self, sql: str, params: tuple[Any, ...]) -> int:
        """Run one write in its own transaction and return the affected row count."""

        def work(conn: psycopg.Connection) -> int:
            with conn.transaction(), conn.cursor() as cur:
                cur.execute(sql, params)
                return cur.rowcount

        return await self._run(work)

    async def _fetch_one(self, sql: str, params: tuple[Any, ...]) -> dict[str, Any] | None:
        def work(conn: psycopg.Connection) -> dict[str, Any] | None:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, params)
                return cur.fetchone()

        return await self._run(work)

    async def _fetch_all(self, sql: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        def work(conn: psycopg.Connection) -> list[dict[str, Any]]:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(sql, params)
                return cur.fetchall()

        return await self._run(work)

    async def _fetch_trip_with_events(self, trip_sql: str, params: tuple[Any, ...]) -> TripWithEvents | None:
        """Read a trip and its events in one transaction.

        The trip row is locked FOR SHARE, so a concurrent delete waits until
        both reads are done.
        """

        def work(conn: psycopg.Connection) -> TripWithEvents | None:
            with conn.transaction(), conn.cursor(row_factory=dict_row) as cur:
                cur.execute(trip_sql, params)
                row = cur.fetchone()
                if row is None:
                    return None
                cur.execute(_SELECT_EVENTS_SQL, (row["id"],))
                events = [_row_to_event(r) for r in cur.fetchall()]
            return TripWithEvents(trip=_row_to_trip(row), events=events)

        return await self._run(work)

    async def create_trip(
        self,
        principal: str,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> int:
        validate_trip(name, start_date, end_date)

        def work(conn: psycopg.Connection) -> int | None:
            params = (principal, name, destination, start_date, end_date, now_nanos(), new_share_token())
            try:
                with conn.transaction(), conn.cursor() as cur:
                    cur.execute(_INSERT_TRIP_SQL, params)
                    return int(cur.fetchone()[0])
            except psycopg.errors.UniqueViolation:
                logger.warning("Share token collision, regenerating")
                return None

        for _ in range(_MAX_TOKEN_ATTEMPTS):
            trip_id = await self._run(work)
            if trip_id is not None:
                logger.info("Created trip %d for %s", trip_id, principal)
                return trip_id
        raise LayoverError("Could not generate a unique share token", code=ErrorCode.INTERNAL_ERROR)

    async def update_trip(
        self,
        principal: str,
        trip_id: int,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> None:
        validate_trip(name, start_date, end_date)
        if await self._execute(_UPDATE_TRIP_SQL, (name, destination, start_date, end_date, trip_id, principal)) == 0:
            raise NotFoundError(f"Trip {trip_id} not found")

    async def delete_trip(self, principal: str, trip_id: int) -> None:
        if await self._execute(_DELETE_TRIP_SQL, (trip_id, principal)) == 0:
            raise NotFoundError(f"Trip {trip_id} not found")
        logger.info("Deleted trip %d for %s", trip_id, principal)

    async def get_trips(self, principal: str) -> list[Trip]:
        return [_row_to_trip(row) for row in await self._fetch_all(_SELECT_TRIPS_SQL, (principal,))]

    async def get_trip_by_id(self, principal: str, trip_id: int) -> TripWithEvents | None:
        return await self._fetch_trip_with_events(_SELECT_TRIP_SQL, (trip_id, principal))

    async def create_event(
        self,
        principal: str,
        trip_id: int,
        event_type: EventType,
        title: str,
        date_time: int,
        location: Location,
        confirmation_code: str | None = None,
        notes: str | None = None,
    ) -> int:
        validate_event(title, date_time, location)
        params = (
            event_type.value,
            title,
            date_time,
            location.name,
            location.address,
            confirmation_code,
            notes,
            now_nanos(),
            trip_id,
            principal,
        )

        def work(conn: psycopg.Connection) -> tuple[Any, ...] | None:
            with conn.transaction(), conn.cursor() as cur:
                cur.execute(_INSERT_EVENT_SQL, params)
                return cur.fetchone()

        row = await self._run(work)
        if row is None:
            raise NotFoundError(f"Trip {trip_id} not found")
        return int(row[0])

    async def update_event(
        self,
        principal: str,
        event_id: int,
        event_type: EventType,
        title: str,
        date_time: int,
        location: Location,
        confirmation_code: str | None = None,
        notes: str | None = None,
    ) -> None:
        validate_event(title, date_time, location)
        params = (
            event_type.value,
            title,
            date_time,
            location.name,
            location.address,
            confirmation_code,
            notes,
            event_id,
            principal,
        )
        if await self._execute(_UPDATE_EVENT_SQL, params) == 0:
            raise NotFoundError(f"Event {event_id} not found")

    async def delete_event(self, principal: str, event_id: int) -> None:
        if await self._execute(_DELETE_EVENT_SQL, (event_id, principal)) == 0:
            raise NotFoundError(f"Event {event_id} not found")

    async def get_events(self, principal: str, trip_id: int) -> list[Event]:
        return [_row_to_event(row) for row in await self._fetch_all(_SELECT_OWNED_EVENTS_SQL, (trip_id, principal))]

    async def get_shared_trip(self, share_token: str) -> TripWithEvents | None:
        return await self._fetch_trip_with_events(_SELECT_SHARED_TRIP_SQL, (share_token,))

    async def set_profile(self, principal: str, name: str) -> None:
        validate_profile(name)
        await self._execute(_UPSERT_PROFILE_SQL, (principal, name))

    async def get_profile(self, principal: str) -> Profile | None:
        row = await self._fetch_one(_SELECT_PROFILE_SQL, (principal,))
        return Profile(name=row["name"]) if row is not None else None

    def __enter__(self) -> "AuroraItineraryStore":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()
