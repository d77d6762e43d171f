"""
Database ORM models for Layover.

Importing this package registers all models on Base.metadata,
which Alembic needs for autogenerate.
"""

from layover.db.schemas.base import Base
from layover.db.schemas.event import Event
from layover.db.schemas.profile import Profile
from layover.db.schemas.trip import Trip

__all__ = ["Base", "Event", "Profile", "Trip"]
