"""Debounced, latest-wins place search for the event form.

Each new query supersedes the previous one and cancels its pending task,
whether it is still waiting out the debounce or already waiting on the
lookup service. A response that arrives for a superseded query anyway is
discarded. Only the most recent query can change the visible state.
"""

import asyncio
import logging

from pydantic import BaseModel

from layover.errors import TransientError
from layover.models import Location, PlaceCandidate
from layover.services.places import PlaceLookup

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class PlaceSearchState(BaseModel):
    query: str = ""
    results: list[PlaceCandidate] = []
    is_searching: bool = False
    failed: bool = False


class PlaceSearch:
    def __init__(self, lookup: PlaceLookup, debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS) -> None:
        self._lookup = lookup
        self._debounce = debounce_seconds
        self._state = PlaceSearchState()
        self._generation = 0
        self._pending: asyncio.Task | None = None

    @property
    def state(self) -> PlaceSearchState:
        return self._state

    def update_query(self, query: str) -> asyncio.Task | None:
        """Start a debounced search for ``query``; must be called from a running loop.

        A blank query clears the results without sending a request.
        """
        self._generation += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

        if not query.strip():
            self._state = PlaceSearchState(query=query)
            return None

        self._state = PlaceSearchState(query=query, results=self._state.results)
        self._pending = asyncio.get_running_loop().create_task(self._run(query, self._generation))
        return self._pending

    async def _run(self, query: str, generation: int) -> None:
        await asyncio.sleep(self._debounce)
        if generation != self._generation:
            return

        self._state = PlaceSearchState(query=query, results=self._state.results, is_searching=True)
        try:
            results = await self._lookup.search(query)
        except TransientError as e:
            logger.warning("Location search failed: %s", e.message)
            if generation == self._generation:
                self._state = PlaceSearchState(query=query, failed=True)
            return

        if generation == self._generation:
            self._state = PlaceSearchState(query=query, results=results)
        else:
            logger.debug("Discarding superseded search results for %r", query)

    async def wait(self) -> PlaceSearchState:
        """Wait for the current search (if any) to settle and return the state."""
        if self._pending is not None:
            await asyncio.wait([self._pending])
        return self._state

    def select(self, candidate: PlaceCandidate) -> Location:
        """Pick a result: reset the search and return the location for the form."""
        self._generation += 1
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self._state = PlaceSearchState()
        return candidate.to_location()
