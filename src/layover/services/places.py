"""Place lookup against the Photon geocoder (OpenStreetMap data).

The lookup is an external collaborator: failures are reported as
TransientError(SEARCH_FAILED) so the event form can show a "search failed"
state and let the user type the location by hand.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any

import pydantic
import requests

from layover.errors import ErrorCode, TransientError
from layover.models import PlaceCandidate

logger = logging.getLogger(__name__)

USER_AGENT = "Layover/1.0 (itinerary place lookup)"


def _coordinates(feature: dict[str, Any]) -> tuple[Any, Any]:
    coordinates = (feature.get("geometry") or {}).get("coordinates")
    if isinstance(coordinates, list) and len(coordinates) >= 2:
        return coordinates[0], coordinates[1]
    return None, None


def photon_feature_to_candidate(feature: dict[str, Any]) -> PlaceCandidate:
    """Map one GeoJSON feature to a candidate. Raises on a feature that is not an object."""
    props = feature.get("properties") or {}
    longitude, latitude = _coordinates(feature)
    return PlaceCandidate(
        name=props.get("name") or "",
        street=props.get("street"),
        housenumber=props.get("housenumber"),
        city=props.get("city"),
        state=props.get("state"),
        country=props.get("country"),
        countrycode=props.get("countrycode"),
        postcode=props.get("postcode"),
        place_type=props.get("type"),
        longitude=longitude,
        latitude=latitude,
    )


class PlaceLookup(ABC):
    @abstractmethod
    async def search(self, query: str) -> list[PlaceCandidate]:
        """Return candidates in the provider's ranking order."""
        ...


class PhotonPlaceLookup(PlaceLookup):
    def __init__(self, base_url: str, limit: int = 5, timeout: float = 10.0) -> None:
        self._base_url = base_url
        self._limit = limit
        self._timeout = timeout

    def _get(self, query: str) -> dict[str, Any]:
        response = requests.get(
            self._base_url,
            params={"q": query, "limit": self._limit},
            headers={"User-Agent": USER_AGENT},
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()

    async def search(self, query: str) -> list[PlaceCandidate]:
        try:
            data = await asyncio.to_thread(self._get, query)
        except requests.Timeout as e:
            raise TransientError(f"Place search timed out for {query!r}", code=ErrorCode.SEARCH_FAILED) from e
        except (requests.RequestException, ValueError) as e:
            raise TransientError(f"Place search failed for {query!r}: {e}", code=ErrorCode.SEARCH_FAILED) from e

        features = (data.get("features") or []) if isinstance(data, dict) else None
        if not isinstance(features, list):
            raise TransientError(f"Malformed place search response for {query!r}", code=ErrorCode.SEARCH_FAILED)
        logger.debug("Place search %r returned %d features", query, len(features))
        try:
            return [photon_feature_to_candidate(f) for f in features]
        except (AttributeError, TypeError, IndexError, pydantic.ValidationError) as e:
            raise TransientError(f"Malformed place in results for {query!r}: {e}", code=ErrorCode.SEARCH_FAILED) from e
