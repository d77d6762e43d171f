"""Write-time invariants shared by every store backend."""

import secrets

from layover.errors import ErrorCode, ValidationError
from layover.models import Location
from layover.timeutil import is_valid_instant

SHARE_TOKEN_BYTES = 24


def _is_blank(value: str) -> bool:
    return not value or not value.strip()


def _require_instant(field: str, value: int) -> None:
    if not is_valid_instant(value):
        raise ValidationError(f"{field} {value} is outside the supported date range", code=ErrorCode.INVALID_REQUEST)


def validate_trip(name: str, start_date: int | None, end_date: int | None) -> None:
    if _is_blank(name):
        raise ValidationError("Trip name must not be empty", code=ErrorCode.EMPTY_NAME)
    for field, value in (("start_date", start_date), ("end_date", end_date)):
        if value is not None:
            _require_instant(field, value)
    if start_date is not None:
        if end_date is None:
            raise ValidationError("end_date is required when start_date is set", code=ErrorCode.INVALID_DATE_RANGE)
        if end_date < start_date:
            raise ValidationError("end_date must not be before start_date", code=ErrorCode.INVALID_DATE_RANGE)


def validate_event(title: str, date_time: int, location: Location) -> None:
    if _is_blank(title):
        raise ValidationError("Event title must not be empty", code=ErrorCode.EMPTY_TITLE)
    if _is_blank(location.name):
        raise ValidationError("Location name must not be empty", code=ErrorCode.EMPTY_LOCATION_NAME)
    _require_instant("date_time", date_time)


def validate_profile(name: str) -> None:
    if _is_blank(name):
        raise ValidationError("Profile name must not be empty", code=ErrorCode.EMPTY_NAME)


def new_share_token() -> str:
    return secrets.token_urlsafe(SHARE_TOKEN_BYTES)
