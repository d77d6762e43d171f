"""Pydantic models for place-lookup candidates."""

from pydantic import BaseModel

from layover.models.itinerary import Location


class PlaceCandidate(BaseModel):
    name: str = ""
    street: str | None = None
    housenumber: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    countrycode: str | None = None
    postcode: str | None = None
    place_type: str | None = None
    longitude: float | None = None
    latitude: float | None = None

    @property
    def label(self) -> str:
        """Display text for a search result row."""
        parts = [self.name, self.city, self.state, self.country]
        return ", ".join(p for p in parts if p)

    def to_location(self) -> Location:
        parts = [self.street, self.city, self.state, self.country]
        address = ", ".join(p for p in parts if p)
        return Location(name=self.name, address=address or None)
