"""JSON response helpers shared by the HTTP handlers."""

import json
from typing import Any

from pydantic import BaseModel

from layover.errors import LayoverError

_HEADERS = {"Content-Type": "application/json"}


def _encode(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True)
    if isinstance(body, list):
        return [_encode(item) for item in body]
    return body


def json_response(status_code: int, body: Any = None) -> dict[str, Any]:
    response: dict[str, Any] = {"statusCode": status_code, "headers": dict(_HEADERS)}
    if body is not None:
        response["body"] = json.dumps(_encode(body))
    return response


def error_response(status_code: int, error: LayoverError) -> dict[str, Any]:
    """Client-facing error body. Only the user message leaves the service."""
    return json_response(status_code, {"code": error.code.value, "message": error.user_message})
