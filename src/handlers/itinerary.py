"""Owner-mode itinerary API handler.

One Lambda serves every authenticated route; ``routeKey`` selects the
operation. The principal comes from the authorizer context, never from the
request body.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import pydantic

from handlers.responses import error_response, json_response
from layover.access import OwnerAccess
from layover.clients import get_itinerary_store
from layover.config import get_config
from layover.errors import (
    AuthenticationError,
    ErrorCode,
    LayoverError,
    NotFoundError,
    TransientError,
    ValidationError,
)
from layover.models import EventRequest, ProfileRequest, TripRequest
from layover.services.sharing import build_share_email, build_share_url

logger = logging.getLogger(__name__)

Route = Callable[[OwnerAccess, dict[str, Any]], Awaitable[dict[str, Any]]]


def _path_id(event: dict[str, Any]) -> int:
    raw = (event.get("pathParameters") or {}).get("id", "")
    try:
        return int(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid id {raw!r}", code=ErrorCode.INVALID_REQUEST) from e


def _body(event: dict[str, Any]) -> dict[str, Any]:
    try:
        return json.loads(event.get("body") or "{}")
    except json.JSONDecodeError as e:
        raise ValidationError(f"Malformed JSON body: {e}", code=ErrorCode.INVALID_REQUEST) from e


async def _list_trips(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    return json_response(200, await owner.get_trips())


async def _create_trip(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    req = TripRequest.model_validate(_body(event))
    trip_id = await owner.create_trip(req.name, req.destination, req.start_date, req.end_date)
    return json_response(201, {"id": trip_id})


async def _get_trip(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    trip_id = _path_id(event)
    trip = await owner.get_trip_by_id(trip_id)
    if trip is None:
        raise NotFoundError(f"Trip {trip_id} not found")
    return json_response(200, trip)


async def _update_trip(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    req = TripRequest.model_validate(_body(event))
    await owner.update_trip(_path_id(event), req.name, req.destination, req.start_date, req.end_date)
    return json_response(204)


async def _delete_trip(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    await owner.delete_trip(_path_id(event))
    return json_response(204)


async def _share_trip(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    trip_id = _path_id(event)
    found = await owner.get_trip_by_id(trip_id)
    if found is None:
        raise NotFoundError(f"Trip {trip_id} not found")
    url = build_share_url(get_config().share_base_url, found.trip.share_token)
    return json_response(200, {"url": url, "mailto": build_share_email(found.trip.name, url)})


async def _list_events(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    return json_response(200, await owner.get_events(_path_id(event)))


async def _create_event(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    req = EventRequest.model_validate(_body(event))
    event_id = await owner.create_event(
        _path_id(event),
        req.event_type,
        req.title,
        req.date_time,
        req.location,
        req.confirmation_code,
        req.notes,
    )
    return json_response(201, {"id": event_id})


async def _update_event(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    req = EventRequest.model_validate(_body(event))
    await owner.update_event(
        _path_id(event),
        req.event_type,
        req.title,
        req.date_time,
        req.location,
        req.confirmation_code,
        req.notes,
    )
    return json_response(204)


async def _delete_event(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    await owner.delete_event(_path_id(event))
    return json_response(204)


async def _get_profile(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    profile = await owner.get_profile()
    if profile is None:
        raise NotFoundError("Profile not set")
    return json_response(200, profile)


async def _set_profile(owner: OwnerAccess, event: dict[str, Any]) -> dict[str, Any]:
    req = ProfileRequest.model_validate(_body(event))
    await owner.set_profile(req.name)
    return json_response(204)


ROUTES: dict[str, Route] = {
    "GET /trips": _list_trips,
    "POST /trips": _create_trip,
    "GET /trips/{id}": _get_trip,
    "PUT /trips/{id}": _update_trip,
    "DELETE /trips/{id}": _delete_trip,
    "GET /trips/{id}/share": _share_trip,
    "GET /trips/{id}/events": _list_events,
    "POST /trips/{id}/events": _create_event,
    "PUT /events/{id}": _update_event,
    "DELETE /events/{id}": _delete_event,
    "GET /profile": _get_profile,
    "PUT /profile": _set_profile,
}


def _principal(event: dict[str, Any]) -> str:
    try:
        return event["requestContext"]["authorizer"]["lambda"]["principalId"]
    except (KeyError, TypeError) as e:
        raise AuthenticationError("Missing authorizer context", code=ErrorCode.NOT_AUTHENTICATED) from e


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    route_key = event.get("routeKey", "")
    route = ROUTES.get(route_key)
    if route is None:
        return error_response(404, NotFoundError(f"No route {route_key}"))

    try:
        owner = OwnerAccess(get_itinerary_store(), _principal(event))
        return asyncio.run(route(owner, event))
    except pydantic.ValidationError as e:
        return error_response(400, ValidationError(str(e), code=ErrorCode.INVALID_REQUEST))
    except ValidationError as e:
        return error_response(400, e)
    except AuthenticationError as e:
        return error_response(401, e)
    except NotFoundError as e:
        return error_response(404, e)
    except TransientError as e:
        logger.warning("Transient failure on %s: %s", route_key, e.message)
        return error_response(503, e)
    except LayoverError as e:
        logger.exception("Unhandled error on %s", route_key)
        return error_response(500, e)
