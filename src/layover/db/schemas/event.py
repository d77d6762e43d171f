"""SQLAlchemy ORM model for the events table."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Identity, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from layover.db.schemas.base import Base

if TYPE_CHECKING:
    from layover.db.schemas.trip import Trip


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(BigInteger, Identity(start=1), primary_key=True)
    trip_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    event_type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    date_time: Mapped[int] = mapped_column(BigInteger, nullable=False)
    location_name: Mapped[str] = mapped_column(Text, nullable=False)
    location_address: Mapped[str | None] = mapped_column(Text)
    confirmation_code: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    trip: Mapped["Trip"] = relationship(back_populates="events")

    __table_args__ = (
        CheckConstraint("event_type IN ('Flight', 'Hotel', 'Activity')", name="chk_events_event_type"),
        CheckConstraint("length(trim(title)) > 0", name="chk_events_title"),
        CheckConstraint("length(trim(location_name)) > 0", name="chk_events_location_name"),
        Index("idx_events_trip_id", "trip_id"),
    )
