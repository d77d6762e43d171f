"""Share-mode handler: anonymous, read-only ``GET /shared?share=<token>``."""

import asyncio
import logging
from typing import Any

from handlers.responses import error_response, json_response
from layover.access import ShareAccess, share_token_from_query
from layover.clients import get_itinerary_store
from layover.errors import ErrorCode, NotFoundError, TransientError

logger = logging.getLogger(__name__)


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    if event.get("routeKey", "GET /shared") != "GET /shared":
        return error_response(404, NotFoundError("Unknown share route", code=ErrorCode.INVALID_SHARE_LINK))

    token = share_token_from_query(event.get("rawQueryString", ""))
    if token is None:
        return error_response(404, NotFoundError("Missing share token", code=ErrorCode.INVALID_SHARE_LINK))

    try:
        shared = asyncio.run(ShareAccess(get_itinerary_store(), token).get_shared_trip())
    except TransientError as e:
        logger.warning("Shared trip lookup failed: %s", e.message)
        return error_response(503, e)

    if shared is None:
        return error_response(404, NotFoundError("Unknown share token", code=ErrorCode.INVALID_SHARE_LINK))
    return json_response(200, shared)
