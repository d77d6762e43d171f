"""
Core package for Layover.

Trips, events and profiles, the itinerary store that owns them, the
day-grouping timeline, the client-side sync layer and the access boundary
all live here. Lambda handlers in src/handlers/ are thin wrappers that call
into layover/.
"""

__all__: list[str] = []
