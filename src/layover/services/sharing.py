"""Share-link helpers for the read-only trip view."""

from urllib.parse import quote, urlencode

SHARE_PARAM = "share"


def build_share_url(base_url: str, share_token: str) -> str:
    """``https://layover.example?share=<token>``."""
    return f"{base_url.rstrip('/')}?{urlencode({SHARE_PARAM: share_token})}"


def build_share_email(trip_name: str, share_url: str) -> str:
    subject = quote(f"Check out my trip: {trip_name}")
    body = quote(f"I'd like to share my trip itinerary with you:\n\n{share_url}")
    return f"mailto:?subject={subject}&body={body}"
