"""
Supporting services for Layover.

- places.py: Photon place lookup for the event form
- sharing.py: share link and share-by-email helpers
- migration.py: Alembic migrations for the Aurora store
"""

__all__: list[str] = []
