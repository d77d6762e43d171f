"""Access boundary between owner mode and share mode.

Owner mode needs an authenticated principal and exposes full CRUD over that
principal's own trips. Share mode needs only a share token and exposes a
single read, ``get_shared_trip``. There is no third mode and no anonymous
path to any write.
"""

import logging
from enum import Enum
from urllib.parse import parse_qs

from layover.auth import AuthProvider
from layover.errors import AuthenticationError, ErrorCode
from layover.models import Event, EventType, Location, Profile, Trip, TripWithEvents
from layover.services.sharing import SHARE_PARAM
from layover.store import ItineraryStore

logger = logging.getLogger(__name__)


class AccessMode(str, Enum):
    OWNER = "owner"
    SHARE = "share"


class IdentityState(str, Enum):
    INITIALIZING = "initializing"  # identity not restored yet; wait
    SIGNED_OUT = "signed_out"
    NEEDS_PROFILE = "needs_profile"
    READY = "ready"


def resolve_identity_state(initializing: bool, principal: str | None, profile: Profile | None) -> IdentityState:
    if initializing:
        return IdentityState.INITIALIZING
    if principal is None:
        return IdentityState.SIGNED_OUT
    if profile is None or not profile.name:
        return IdentityState.NEEDS_PROFILE
    return IdentityState.READY


def share_token_from_query(query_string: str) -> str | None:
    values = parse_qs(query_string.lstrip("?")).get(SHARE_PARAM) or []
    token = values[0].strip() if values else ""
    return token or None


def route_request(query_string: str) -> AccessMode:
    """A ``share`` query parameter puts the request in share mode, no negotiation."""
    return AccessMode.SHARE if share_token_from_query(query_string) else AccessMode.OWNER


class OwnerAccess:
    """Every CRUD operation, bound to one principal."""

    mode = AccessMode.OWNER

    def __init__(self, store: ItineraryStore, principal: str) -> None:
        if not principal:
            raise AuthenticationError("Owner access requires a principal", code=ErrorCode.NOT_AUTHENTICATED)
        self._store = store
        self.principal = principal

    async def create_trip(
        self,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> int:
        return await self._store.create_trip(self.principal, name, destination, start_date, end_date)

    async def update_trip(
        self,
        trip_id: int,
        name: str,
        destination: str | None = None,
        start_date: int | None = None,
        end_date: int | None = None,
    ) -> None:
        await self._store.update_trip(self.principal, trip_id, name, destination, start_date, end_date)

    async def delete_trip(self, trip_id: int) -> None:
        await self._store.delete_trip(self.principal, trip_id)

    async def get_trips(self) -> list[Trip]:
        return await self._store.get_trips(self.principal)

    async def get_trip_by_id(self, trip_id: int) -> TripWithEvents | None:
        return await self._store.get_trip_by_id(self.principal, trip_id)

    async def create_event(
        self,
        trip_id: int,
        event_type: EventType,
        title: str,
        date_time: int,
        location: Location,
        confirmation_code: str | None = None,
        notes: str | None = None,
    ) -> int:
        return await self._store.create_event(
            self.principal, trip_id, event_type, title, date_time, location, confirmation_code, notes
        )

    async def update_event(
        self,
        event_id: int,
        event_type: EventType,
        title: str,
        date_time: int,
        location: Location,
        confirmation_code: str | None = None,
        notes: str | None = None,
    ) -> None:
        await self._store.update_event(
            self.principal, event_id, event_type, title, date_time, location, confirmation_code, notes
        )

    async def delete_event(self, event_id: int) -> None:
        await self._store.delete_event(self.principal, event_id)

    async def get_events(self, trip_id: int) -> list[Event]:
        return await self._store.get_events(self.principal, trip_id)

    async def set_profile(self, name: str) -> None:
        await self._store.set_profile(self.principal, name)

    async def get_profile(self) -> Profile | None:
        return await self._store.get_profile(self.principal)


class ShareAccess:
    """Read-only view of the single trip a share token points at."""

    mode = AccessMode.SHARE

    def __init__(self, store: ItineraryStore, share_token: str) -> None:
        self._store = store
        self.share_token = share_token

    async def get_shared_trip(self) -> TripWithEvents | None:
        return await self._store.get_shared_trip(self.share_token)


class AccessBoundary:
    def __init__(self, store: ItineraryStore, auth_provider: AuthProvider | None = None) -> None:
        self._store = store
        self._auth_provider = auth_provider

    async def open_owner(self, bearer_token: str) -> OwnerAccess:
        if self._auth_provider is None:
            raise AuthenticationError("No auth provider configured", code=ErrorCode.AUTH_FAILED)
        user = await self._auth_provider.verify_token(bearer_token)
        return OwnerAccess(self._store, user.user_id)

    def open_principal(self, principal: str) -> OwnerAccess:
        """Owner access for a principal an upstream authorizer already verified."""
        return OwnerAccess(self._store, principal)

    def open_share(self, share_token: str) -> ShareAccess:
        return ShareAccess(self._store, share_token)

    async def open(self, query_string: str, bearer_token: str | None) -> OwnerAccess | ShareAccess:
        token = share_token_from_query(query_string)
        if token is not None:
            logger.debug("Routing request to share mode")
            return self.open_share(token)
        if not bearer_token:
            raise AuthenticationError("Sign-in required", code=ErrorCode.NOT_AUTHENTICATED)
        return await self.open_owner(bearer_token)
