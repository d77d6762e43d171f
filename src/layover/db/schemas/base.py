"""
SQLAlchemy declarative base for the itinerary tables.

Alembic reads Base.metadata; the Aurora store itself issues plain SQL.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
